"""Utilities for turning documents into HTML pages."""

from .link_rewriter import PermalinkLinkExtension
from .markup import BodyFormatter, HtmlContentRenderer
from .templates import Template, TemplateSet, render_document

__all__ = [
    "BodyFormatter",
    "HtmlContentRenderer",
    "PermalinkLinkExtension",
    "Template",
    "TemplateSet",
    "render_document",
]
