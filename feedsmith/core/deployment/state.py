"""Deployment status transitions."""

from feedsmith.models.enums import ContentStatus, EnvironmentName


def next_status(status: ContentStatus, environment: EnvironmentName) -> ContentStatus:
    """Return the status of an item after it is deployed to an environment.

    Staging moves any undeployed item to STAGED. Production promotes
    STAGED items to DEPLOYED and leaves everything else alone, so items
    must pass through staging first. DEPLOYED and SKIPPED are final.

    Args:
        status: Current status
        environment: Target environment of the run

    Returns:
        The new status (the same status when nothing changes).

    """
    if status in (ContentStatus.DEPLOYED, ContentStatus.SKIPPED):
        return status
    if environment == EnvironmentName.STAGE:
        return ContentStatus.STAGED
    if status == ContentStatus.STAGED:
        return ContentStatus.DEPLOYED
    return status
