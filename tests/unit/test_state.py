import pytest

from feedsmith.core.deployment import next_status
from feedsmith.models.content import OrganisationSite, SiteStatus
from feedsmith.models.enums import ContentStatus, EnvironmentName


@pytest.mark.parametrize(
    'status,environment,expected',
    [
        (ContentStatus.NEW, EnvironmentName.STAGE, ContentStatus.STAGED),
        (ContentStatus.PENDING, EnvironmentName.STAGE, ContentStatus.STAGED),
        (ContentStatus.STAGED, EnvironmentName.STAGE, ContentStatus.STAGED),
        (ContentStatus.STAGED, EnvironmentName.PROD, ContentStatus.DEPLOYED),
        (ContentStatus.PENDING, EnvironmentName.PROD, ContentStatus.PENDING),
        (ContentStatus.NEW, EnvironmentName.PROD, ContentStatus.NEW),
        (ContentStatus.DEPLOYED, EnvironmentName.STAGE, ContentStatus.DEPLOYED),
        (ContentStatus.DEPLOYED, EnvironmentName.PROD, ContentStatus.DEPLOYED),
        (ContentStatus.SKIPPED, EnvironmentName.STAGE, ContentStatus.SKIPPED),
        (ContentStatus.SKIPPED, EnvironmentName.PROD, ContentStatus.SKIPPED),
    ],
)
def test_next_status(status, environment, expected):
    assert next_status(status, environment) == expected


def test_pending_item_moves_through_stage_to_prod():
    status = next_status(ContentStatus.PENDING, EnvironmentName.STAGE)
    status = next_status(status, EnvironmentName.PROD)

    assert status == ContentStatus.DEPLOYED


@pytest.mark.parametrize(
    'site_status,stage,prod',
    [
        (SiteStatus.ACTIVE, True, True),
        (SiteStatus.REVIEW, True, False),
        (SiteStatus.ARCHIVED, False, False),
        (SiteStatus.DISABLED, False, False),
    ],
)
def test_listing_published_by_environment(site_status, stage, prod):
    site = OrganisationSite(code='ACME', site_id='main', status=site_status)

    assert site.is_published(EnvironmentName.STAGE) is stage
    assert site.is_published(EnvironmentName.PROD) is prod
