"""
Workspace provisioning: location resolution, clone and config seeding.
"""

from zenlaunch.core.workspace.provisioner import WorkspaceProvisioner, resolve_workspace

__all__ = ["WorkspaceProvisioner", "resolve_workspace"]
