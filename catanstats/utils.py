"""JSON persistence for configuration and game dumps."""

import json
import logging
from pathlib import Path
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar('ModelT', bound=BaseModel)
logger = logging.getLogger('catanstats.utils')


def load_json(path: Path | str, schema: Optional[type[ModelT]] = None) -> Any | ModelT:
    """
    Read a JSON document, validating it against a pydantic model if given.

    Args:
        path: File to read
        schema: Model the top-level object must satisfy

    Returns:
        The validated model, or the raw decoded JSON without a schema

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not JSON or fails validation
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f'File not found: {path}')

    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        raise ValueError(f'{path} is not valid JSON (line {e.lineno}): {e.msg}') from e

    if schema is None:
        return data

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.error(f'{path} does not match {schema.__name__}: {e.error_count()} errors')
        raise ValueError(f'Schema validation failed for {path}:\n{e}') from e


def save_json(path: Path | str, data: Any) -> None:
    """Write data (a pydantic model or plain JSON values) to path, creating parent dirs."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(data, BaseModel):
        data = data.model_dump(mode='json', exclude_none=True)

    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + '\n', encoding='utf-8')
    logger.debug(f'Wrote {path}')
