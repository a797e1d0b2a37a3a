"""Base formatter interface for report rendering."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from sqlreviewer.analyze.scoring import score_badge
from sqlreviewer.config import ReviewConfig
from sqlreviewer.report.model import Report

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

_MD_SPECIAL = re.compile(r"([\\`*_\[\]#|])")


def md_escape(text: str) -> str:
    return _MD_SPECIAL.sub(r"\\\1", text or "")


@lru_cache(maxsize=1)
def template_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "html.j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["md_escape"] = md_escape
    env.filters["score_badge"] = score_badge
    return env


class BaseFormatter(ABC):
    """One output format. Formatters read the Report and never modify it."""

    name: str = ""

    @abstractmethod
    def format(self, report: Report, config: ReviewConfig) -> str:
        """Return the rendered report."""
