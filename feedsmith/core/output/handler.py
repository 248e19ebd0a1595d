"""Builds feed spreadsheets and ships them to their targets."""

import logging
import shutil
from pathlib import Path
from typing import ClassVar

import logfire
from rich.console import Console

from feedsmith.core.transport import TransportClients
from feedsmith.exceptions import TransportError
from feedsmith.models.config import ContentConfig
from feedsmith.models.enums import EnvironmentName
from feedsmith.models.fields import ID, PUBDATE, PUBLISHED_DATE, Fields
from feedsmith.outputs import load_rows, save_rows
from feedsmith.retry import transport_retryer
from feedsmith.settings import TransportSettings
from feedsmith.utils.text import convert_to_ascii, substitute


class ContentHandler:
    """Holds the rows of one feed file and moves the file around.

    The first row is always the header row, taken from the keys of the
    output map. Each output value is a ${field} template.

    Attributes:
        DEFAULT_SHEET: Worksheet name used when none is configured
        filename: Current working filename (switches to the CSV name)
        output: Column header to template, in column order
        working_dir: Local directory the file is written in
        sheet: Worksheet name
        lines: Header row followed by data rows
        clients: Transport client registry
        settings: Transport timeouts and retries
        console: Rich console instance for formatted output
        logger: Logger instance

    """

    DEFAULT_SHEET: ClassVar[str] = 'Sheet1'

    def __init__(
        self,
        filename: str,
        output: dict[str, str],
        working_dir: Path,
        sheet: str = DEFAULT_SHEET,
        clients: TransportClients | None = None,
        console: Console | None = None,
    ):
        """Initialize the handler.

        Args:
            filename: Spreadsheet filename (.csv or .xlsx)
            output: Column header to ${field} template, in column order
            working_dir: Local directory the file is written in
            sheet: Worksheet name. Defaults to 'Sheet1'.
            clients: Transport client registry. Required for remote copies.
            console: Rich console instance for formatted output. Defaults to None (creates new Console).

        """
        self.filename = filename
        self.output = dict(output)
        self.working_dir = Path(working_dir)
        self.sheet = sheet or self.DEFAULT_SHEET
        self.lines: list[list[str]] = []
        self.clients = clients
        self.settings = clients.settings if clients is not None else TransportSettings()
        self.console = console or Console()
        self.logger = logging.getLogger(__name__)

    @classmethod
    def for_config(
        cls,
        config: ContentConfig,
        working_dir: Path,
        clients: TransportClients | None = None,
        console: Console | None = None,
    ) -> 'ContentHandler':
        """Create a handler for a content config's feed."""
        return cls(config.filename, config.output, working_dir, config.sheet, clients, console)

    @property
    def headers(self) -> list[str]:
        return list(self.output.keys())

    @property
    def path(self) -> Path:
        """Working copy of the current file."""
        return self.working_dir / self.filename

    @property
    def csv_filename(self) -> str:
        """Filename of the CSV rendering of the feed."""
        return f'{Path(self.filename).stem}.csv'

    def use_csv(self) -> None:
        """Switch the working file to the CSV rendering."""
        self.filename = self.csv_filename

    def header_at(self, index: int) -> str:
        headers = self.headers
        return headers[index] if index < len(headers) else ''

    def init_file(self) -> None:
        """Start a fresh file holding only the header row."""
        self.lines = [self.headers]

    def read_file(self) -> None:
        """Load the rows of an existing working file under the current headers.

        A missing file starts an empty feed.
        """
        rows: list[list[str]] = []
        if self.path.exists():
            rows = load_rows(self.path, self.sheet)[1:]
            self.logger.info(f'Read {len(rows)} rows from {self.path}')
        self.lines = [self.headers, *rows]

    def read_file_from_bucket(self, bucket: str) -> bool:
        """Download the file from a bucket and load it.

        Args:
            bucket: Bucket holding the file under its filename

        Returns:
            True if the file was downloaded and read.

        Raises:
            ValueError: If the bucket name is empty

        """
        if not bucket:
            raise ValueError('Bucket name must not be empty')

        try:
            with self._bucket_client() as client:
                self.working_dir.mkdir(parents=True, exist_ok=True)
                for attempt in transport_retryer(self.settings):
                    with attempt:
                        client.get_object(bucket, self.filename, self.path, self.settings.timeout)
        except (OSError, TimeoutError) as e:
            self._log_failure('read_from_bucket', f'{bucket}/{self.filename}', e)
            return False

        self.read_file()
        return True

    def process_inputs(self, fields: Fields) -> Fields:
        """Derive the computed inputs of a record.

        The id is zero-padded to five digits and the published date is
        also exposed as pubdate.
        """
        inputs = fields.copy()
        record_id = inputs.get(ID)
        if record_id and record_id.strip().isdigit():
            inputs[ID] = f'{int(record_id):05d}'
        if inputs.get(PUBLISHED_DATE):
            inputs[PUBDATE] = inputs[PUBLISHED_DATE]
        return inputs

    def get_values(self, fields: Fields) -> list[str]:
        """Render one row by substituting the record into every column template."""
        inputs = self.process_inputs(fields)
        return [substitute(template, inputs) for template in self.output.values()]

    def append_line(self, values: list[str]) -> None:
        self.lines.append(list(values))

    def write_file(self) -> Path:
        """Write the rows to the working file atomically."""
        with logfire.span('write_file', filename=self.filename, rows=len(self.lines)):
            path = save_rows(self.path, self.lines, self.sheet)
        self.logger.info(f'Wrote {len(self.lines) - 1} rows to {path}')
        return path

    def trim_lines(self, first_row: int) -> None:
        """Drop the leading data rows before the first changed row.

        Rows are numbered from 1 after the header, so ``first_row`` is the
        row that is kept first. The header row is never removed.

        Args:
            first_row: Row number of the first changed record

        """
        if first_row > 1 and len(self.lines) > first_row:
            del self.lines[1:first_row]
            self.logger.info(f'Trimmed {first_row - 1} unchanged rows from {self.filename}')

    def convert_lines_to_ascii(self, html_fields: list[str]) -> None:
        """Convert every cell to feed-safe ASCII, escaping HTML columns as entities."""
        for line in self.lines:
            for i, cell in enumerate(line):
                line[i] = convert_to_ascii(cell or '', html=self.header_at(i) in html_fields)

    def copy_file(self, directory: str | Path) -> Path:
        """Copy the working file into a local directory, replacing any existing copy.

        Raises:
            ValueError: If the directory is empty

        """
        if not directory:
            raise ValueError('Directory must not be empty')

        target = Path(directory) / self.filename
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.exists():
            target.unlink()
        shutil.copy2(self.path, target)
        self.logger.info(f'Copied {self.filename} to {target}')
        return target

    def copy_file_to_bucket(self, bucket: str) -> bool:
        """Upload the working file to a bucket under its filename.

        Returns:
            True if the upload succeeded.

        Raises:
            ValueError: If the bucket name is empty

        """
        if not bucket:
            raise ValueError('Bucket name must not be empty')

        try:
            with self._bucket_client() as client:
                for attempt in transport_retryer(self.settings):
                    with attempt:
                        client.put_object(bucket, self.filename, self.path, self.settings.timeout)
        except (OSError, TimeoutError) as e:
            self._log_failure('copy_to_bucket', f'{bucket}/{self.filename}', e)
            return False

        logfire.info('Copied file to bucket', bucket=bucket, filename=self.filename)
        self.console.print(f'  [success]✓ {self.filename} copied to bucket {bucket}[/success]')
        return True

    def copy_file_to_host(self, directory: str, environment: EnvironmentName) -> None:
        """Upload the working file into a directory on an environment's host.

        Raises:
            TransportError: If the upload still fails after retries

        """
        target = f'{environment.value}:{directory}'
        try:
            with self._host_client(environment) as client:
                for attempt in transport_retryer(self.settings):
                    with attempt:
                        client.put(self.path, directory, self.settings.timeout)
        except (OSError, TimeoutError) as e:
            self._log_failure('copy_to_host', target, e)
            raise TransportError(target, 'put', str(e)) from e

        logfire.info('Copied file to host', environment=environment.value, directory=directory, filename=self.filename)
        self.console.print(f'  [success]✓ {self.filename} copied to {target}[/success]')

    def delete_file_from_host(self, directory: str, environment: EnvironmentName) -> None:
        """Remove the file from a directory on an environment's host.

        Raises:
            TransportError: If the delete still fails after retries

        """
        remote_path = f'{directory.rstrip("/")}/{self.filename}'
        target = f'{environment.value}:{remote_path}'
        try:
            with self._host_client(environment) as client:
                for attempt in transport_retryer(self.settings):
                    with attempt:
                        client.delete(remote_path, self.settings.timeout)
        except (OSError, TimeoutError) as e:
            self._log_failure('delete_from_host', target, e)
            raise TransportError(target, 'delete', str(e)) from e

    def delete_file(self) -> None:
        """Remove the working file."""
        self.path.unlink(missing_ok=True)

    def close(self) -> None:
        """Close the transport clients."""
        if self.clients is not None:
            self.clients.close_all()

    def _bucket_client(self):
        if self.clients is None:
            raise ValueError('No transport clients configured')
        return self.clients.bucket()

    def _host_client(self, environment: EnvironmentName):
        if self.clients is None:
            raise ValueError('No transport clients configured')
        return self.clients.host(environment)

    def _log_failure(self, operation: str, target: str, error: Exception) -> None:
        self.logger.error(f'Transport {operation} failed for {target}: {error}')
        logfire.error('Transport failed', operation=operation, target=target, error=str(error))
        self.console.print(f'  [danger]✗ {operation} failed for {target}: {error}[/danger]')
