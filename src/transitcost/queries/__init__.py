"""
SQL query templates bundled with the package.

Each `{name}.sql` file in this package is a template. Placeholders
use the `{NAME}` syntax and are replaced by `load_query`:

    {MIN_LINES}    minimum group size for the HAVING clause
    {MAX_ROWS}     maximum number of returned rows
"""

import hashlib
import re
from dataclasses import dataclass
from importlib.resources import files

_SUFFIX = ".sql"


@dataclass(frozen=True, kw_only=True)
class QueryTemplate:
    """
    Instantiated query template.

    Attributes:
        name: the template name (e.g., "lines_by_country").
        text: the SQL with placeholders replaced.
        template_hash: SHA256 of the original template file.
    """

    name: str
    text: str
    template_hash: str


def query_names() -> list[str]:
    """Return the sorted names of the bundled templates."""
    return sorted(
        entry.name.removesuffix(_SUFFIX)
        for entry in files(__name__).iterdir()
        if entry.name.endswith(_SUFFIX)
    )


def load_query(name: str, **params: object) -> QueryTemplate:
    """
    Load and instantiate a query template.

    Arguments:
        name: the template name, without the `.sql` suffix.
        params: values for the placeholders (e.g., MIN_LINES=10).
            Placeholders without a value are left untouched.

    Raises:
        ValueError if the name is not a valid template name.
        FileNotFoundError if there is no such template.
    """
    if not re.match(r"^[a-z0-9_]+$", name):
        raise ValueError(f"Invalid query name: {name}")
    query_file = files(__name__).joinpath(f"{name}{_SUFFIX}")
    if not query_file.is_file():
        raise FileNotFoundError(f"no such query template: {name}")
    template_text = query_file.read_text()

    # Compute hash of the query template
    template_hash = hashlib.sha256(template_text.encode("utf-8")).hexdigest()

    # Instantiate the template
    text = template_text
    for key, value in params.items():
        text = text.replace(f"{{{key}}}", str(value))

    return QueryTemplate(name=name, text=text, template_hash=template_hash)
