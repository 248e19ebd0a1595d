"""Content deployment: status transitions and feed delivery."""

from feedsmith.core.deployment.deployer import ContentDeployer
from feedsmith.core.deployment.state import next_status

__all__ = ['ContentDeployer', 'next_status']
