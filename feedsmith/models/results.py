"""Models for extraction and deployment results."""

from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from feedsmith.models.enums import ContentType, EnvironmentName
from feedsmith.models.fields import Fields


class FieldResult(BaseModel):
    """Result of evaluating one field against a document.

    Attributes:
        field_name: Name of the evaluated field
        values: Extracted values, empty if nothing was found
        stopped: A stop filter matched, so the owning item must be skipped
        selector: Expression of the selector that produced the values

    """

    field_name: str = Field(description='Name of the field')
    values: list[str] = Field(default_factory=list, description='Extracted values')
    stopped: bool = Field(default=False, description='A stop filter matched')
    selector: str | None = Field(default=None, description='Selector that produced the values')

    @property
    def found(self) -> bool:
        """True if at least one value was extracted."""
        return len(self.values) > 0

    @property
    def value(self) -> str:
        """First extracted value, or an empty string."""
        return self.values[0] if self.values else ''


@dataclass
class ExtractionResult:
    """Fields extracted from one block of a page.

    Attributes:
        fields: Extracted values by field key
        valid: The bundle validator accepted the block
        stopped: A stop filter matched, so the item is to be skipped
        errors: Messages for fields that could not be extracted

    """

    fields: Fields = field(default_factory=Fields)
    valid: bool = True
    stopped: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True if the block was valid and not stopped."""
        return self.valid and not self.stopped


@dataclass
class DeploymentResult:
    """Summary of one deployment run.

    Attributes:
        content_type: Type that was deployed
        environment: Target environment
        rows: Records written to the feed
        changed: Items whose status changed
        first_changed: Running index of the first changed item, -1 if none
        excluded: Codes of items left out because their organisation was missing
        bucket_copied: The spreadsheet reached the content bucket
        host_copied: The CSV feed reached the environment host

    """

    content_type: ContentType
    environment: EnvironmentName
    rows: int = 0
    changed: int = 0
    first_changed: int = -1
    excluded: list[str] = field(default_factory=list)
    bucket_copied: bool = False
    host_copied: bool = False

    @property
    def success(self) -> bool:
        """True if the feed reached both targets."""
        return self.bucket_copied and self.host_copied
