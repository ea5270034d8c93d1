import logging

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
)
from ruamel.yaml.error import YAMLError

from chart_owners.exceptions import LoadError
from chart_owners.utils.ruamel import create_ruamel_instance

CHART_FILE = "Chart.yaml"

_LOG = logging.getLogger(__name__)


class Maintainer(BaseModel, frozen=True):
    name: str
    email: str | None = None
    url: str | None = None

    @property
    def has_whitespace(self) -> bool:
        return any(c.isspace() for c in self.name)


class ChartMetadata(BaseModel):
    # Chart.yaml carries many more keys we do not care about
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    version: str | None = None
    maintainers: list[Maintainer] = Field(default_factory=list)


def load_chart(path: str) -> ChartMetadata:
    try:
        with open(path, encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(path, e) from e

    try:
        data = create_ruamel_instance(typ="safe").load(content)
    except YAMLError as e:
        raise LoadError(path, e) from e

    if not isinstance(data, dict):
        raise LoadError(path, "chart metadata is not a dictionary")

    try:
        # versions like 1.0 are parsed as floats
        if data.get("version") is not None:
            data["version"] = str(data["version"])
        return ChartMetadata.model_validate(data)
    except ValidationError as e:
        raise LoadError(path, e) from e


def read_maintainers(path: str) -> list[Maintainer]:
    chart = load_chart(path)
    _LOG.debug(f"found {len(chart.maintainers)} maintainers in {path}")
    return chart.maintainers
