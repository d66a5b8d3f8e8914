"""
Read and write sessions as JSON files for the CLI.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from splitease.models.session import Session
from splitease.utils.logger import get_logger

logger = get_logger(__name__)


def load_session_file(path: Union[str, Path]) -> Session:
    session_path = Path(path)
    session = Session.model_validate_json(session_path.read_text(encoding="utf-8"))
    logger.info(f"Read session {session.id} from {session_path}")
    return session


def save_session_file(session: Session, path: Union[str, Path]) -> Path:
    session_path = Path(path)
    session_path.parent.mkdir(parents=True, exist_ok=True)
    session_path.write_text(session.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    logger.info(f"Wrote session {session.id} to {session_path}")
    return session_path
