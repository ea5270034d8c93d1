"""
OWNERS file handling: parsing, serializing and collecting the handles of
every OWNERS file found below a directory.
"""

import io
import logging
import os
from collections.abc import (
    Iterable,
    Iterator,
)

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
)
from ruamel.yaml.error import YAMLError

from chart_owners.exceptions import (
    OwnersFileError,
    SerializationError,
    WalkError,
)
from chart_owners.utils.ruamel import create_ruamel_instance

OWNERS_FILE = "OWNERS"

_LOG = logging.getLogger(__name__)


class OwnersRecord(BaseModel):
    """
    The portions of an OWNERS file we are working with. Any other key
    (options, labels, emeritus_approvers...) is ignored.
    """

    approvers: list[str] = Field(default_factory=list)
    reviewers: list[str] = Field(default_factory=list)

    def handles(self) -> Iterator[str]:
        yield from self.approvers
        yield from self.reviewers


class HandleSet:
    """
    De-duplicated collection of GitHub handles. Iteration order is not
    guaranteed.
    """

    def __init__(self, handles: Iterable[str] = ()) -> None:
        self._handles: set[str] = set()
        self.update(handles)

    def add(self, handle: str) -> None:
        self._handles.add(handle)

    def update(self, handles: Iterable[str]) -> None:
        for handle in handles:
            self.add(handle)

    def __contains__(self, handle: object) -> bool:
        return handle in self._handles

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)

    def __repr__(self) -> str:
        return f"HandleSet({sorted(self._handles)!r})"


def parse_owners(content: str, path: str = OWNERS_FILE) -> OwnersRecord:
    """
    Parses OWNERS file YAML content.

    An empty document yields an empty record. Anything that is not a
    mapping with optional string lists raises OwnersFileError.
    """
    try:
        owners = create_ruamel_instance(typ="safe").load(content)
    except YAMLError as e:
        raise OwnersFileError(path, e) from e

    if owners is None:
        return OwnersRecord()

    if not isinstance(owners, dict):
        raise OwnersFileError(path, "content is not a dictionary")

    try:
        return OwnersRecord(
            approvers=owners.get("approvers") or [],
            reviewers=owners.get("reviewers") or [],
        )
    except ValidationError as e:
        raise OwnersFileError(path, e) from e


def read_owners(path: str) -> OwnersRecord:
    try:
        with open(path, encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise OwnersFileError(path, e) from e
    return parse_owners(content, path=path)


def dump_owners(owners: OwnersRecord) -> str:
    """
    Serializes an OwnersRecord to YAML. Empty lists are left out instead of
    being written as `[]`.
    """
    data = owners.model_dump(exclude_defaults=True)
    if not data:
        return "{}\n"
    buf = io.StringIO()
    try:
        create_ruamel_instance(typ="safe").dump(data, buf)
    except YAMLError as e:
        raise SerializationError(f"yaml dump error: {e!s}") from e
    return buf.getvalue()


def _raise_walk_error(error: OSError) -> None:
    raise WalkError(error)


def iter_owners_files(root: str) -> Iterator[tuple[str, OwnersRecord]]:
    """
    Walks `root` and yields every OWNERS file path with its parsed content.

    The first read, parse or walk error stops the walk.
    """
    if os.path.isfile(root):
        if os.path.basename(root) == OWNERS_FILE:
            yield root, read_owners(root)
        return

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        dirnames.sort()
        if OWNERS_FILE in dirnames:
            raise OwnersFileError(os.path.join(dirpath, OWNERS_FILE), "is a directory")
        if OWNERS_FILE in filenames:
            path = os.path.join(dirpath, OWNERS_FILE)
            _LOG.debug(f"processing {path}")
            yield path, read_owners(path)


def collect_handles(root: str) -> HandleSet:
    """
    Gathers the handles used across all OWNERS files below `root`.

    Results of a failed walk are discarded; the error is raised instead.
    """
    handles = HandleSet()
    for _, owners in iter_owners_files(root):
        handles.update(owners.handles())
    return handles
