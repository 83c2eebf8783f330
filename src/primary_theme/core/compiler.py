"""
Theme compilation entry point.

``compile_theme`` runs the whole pipeline for one set of documents:

1. Parse documents (bad documents become parse-error diagnostics)
2. Ingest variables into normalized entries
3. Publish custom colors, imported primitives, then defaults
4. Complete project palettes
5. Resolve semantic tokens (synthesizing primitives on demand)
6. Add the built-in semantic layer and custom declarations
7. Emit both sheets, their JSON mirrors and theme.json
8. Verify that no emitted ``var()`` dangles

All mutable state lives in a CompileContext created per call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from primary_theme.themes.css_generator import (
    check_references,
    declared_names,
    generate_primitives_css,
    generate_tokens_css,
    primitives_to_json,
    tokens_to_json,
)
from primary_theme.themes.global_tokens import add_global_tokens, choose_primary
from primary_theme.themes.theme_json import build_theme_json, validate_theme_json

from .color import to_oklch
from .declarations import Declaration, category_for_name, parse_declarations
from .defaults import add_baseline, add_category_fallbacks
from .diagnostics import Diagnostic, DiagnosticKind, Diagnostics, Severity
from .errors import ParseError
from .ingest import ingest
from .ir.documents import Mode, TokenDocument, is_hex_color, parse_document
from .ir.model import Category, Literal, Primitive, PrimitiveOrigin, Section, Token, TokenSet
from .ir.options import CompileOptions
from .namespace import PrimitiveNamespace
from .palette import fill_missing_steps
from .primitives import extract_primitives, section_for
from .resolver import resolve_tokens

logger = logging.getLogger(__name__)

DocumentInput = TokenDocument | Mapping[str, Any] | str | bytes | tuple[Any, Mode | str | None]


@dataclass
class CompileContext:
    """Per-run state; discarded when compile_theme returns."""

    options: CompileOptions
    namespace: PrimitiveNamespace = field(default_factory=PrimitiveNamespace)
    tokens: TokenSet = field(default_factory=TokenSet)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    primary: str | None = None


@dataclass
class CompileResult:
    """Everything one compilation produced."""

    primitives_css: str
    tokens_css: str
    primitives_json: dict[str, Any]
    tokens_json: dict[str, Any]
    theme_json: dict[str, Any] | None
    diagnostics: list[Diagnostic]
    primitives: list[Primitive]
    tokens: list[Token]
    primary: str | None = None

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]


# =============================================================================
# Documents
# =============================================================================


def _load_document(item: DocumentInput, index: int) -> TokenDocument:
    if isinstance(item, TokenDocument):
        return item
    mode: Mode | str | None = None
    if isinstance(item, tuple):
        item, mode = item
    source = f"document-{index + 1}"
    if isinstance(item, Mapping):
        return parse_document(dict(item), mode=mode, source=source)
    return parse_document(item, mode=mode, source=source)


def load_documents(items: Iterable[DocumentInput], diagnostics: Diagnostics) -> list[TokenDocument]:
    """Parse every input; a broken document is reported and skipped."""
    documents: list[TokenDocument] = []
    for index, item in enumerate(items):
        try:
            document = _load_document(item, index)
        except ParseError as e:
            document_name = e.context.document if e.context else None
            diagnostics.add(DiagnosticKind.PARSE_ERROR, str(e), document=document_name)
            continue
        for rejected in document.rejected:
            diagnostics.add(
                DiagnosticKind.PARSE_ERROR,
                f"{document.source}: invalid variable {rejected}",
                document=document.source,
            )
        documents.append(document)
    return documents


# =============================================================================
# Custom declarations
# =============================================================================


def _is_custom_primitive(declaration: Declaration) -> bool:
    """Custom colors with a literal value are published as primitives."""
    return declaration.is_color and isinstance(declaration.value, Literal)


def _publish_custom_colors(ctx: CompileContext, declarations: list[Declaration]) -> None:
    for declaration in declarations:
        assert isinstance(declaration.value, Literal)
        text = declaration.value.text
        if is_hex_color(text):
            text = to_oklch(text)
        slug = declaration.name.removeprefix("--color-")
        ctx.namespace.add(
            Primitive(
                name=declaration.name,
                value=Literal(text),
                category=Category.COLOR,
                section=section_for(Category.COLOR, slug),
                origin=PrimitiveOrigin.CUSTOM,
            )
        )


def _apply_declarations(ctx: CompileContext, declarations: list[Declaration]) -> None:
    """Remaining custom declarations replace generated tokens or extend the sheet."""
    for declaration in declarations:
        existing = ctx.tokens.get(declaration.name)
        ctx.tokens.replace(
            Token(
                name=declaration.name,
                value=declaration.value,
                category=existing.category if existing else category_for_name(declaration.name),
                section=existing.section if existing else Section.CUSTOM,
                rank=existing.rank if existing else 0,
            )
        )


def _prune_dangling(ctx: CompileContext, custom_names: set[str]) -> None:
    """Drop tokens whose references cannot be satisfied, until stable."""
    while True:
        declared = {p.name for p in ctx.namespace} | {t.name for t in ctx.tokens}
        broken = [
            token
            for token in ctx.tokens
            if any(ref not in declared or ref == token.name for ref in token.value.refs())
        ]
        if not broken:
            return
        for token in broken:
            ctx.tokens.remove(token.name)
            missing = sorted({r for r in token.value.refs() if r not in declared}) or [token.name]
            kind = (
                DiagnosticKind.INVALID_CUSTOM_VARIABLE
                if token.name in custom_names
                else DiagnosticKind.UNRESOLVED_TOKEN
            )
            ctx.diagnostics.add(
                kind,
                f"{token.name} references undeclared {', '.join(missing)}; dropped",
                token=token.name,
            )


# =============================================================================
# Entry point
# =============================================================================


def compile_theme(
    documents: Iterable[DocumentInput] = (),
    options: CompileOptions | Mapping[str, Any] | None = None,
) -> CompileResult:
    """
    Compile token documents into theme sheets.

    Args:
        documents: TokenDocuments, decoded JSON dicts, JSON strings, or
            ``(payload, mode)`` pairs tagging a whole document with a mode
        options: CompileOptions or a mapping of option values

    Returns:
        CompileResult with both sheets, JSON mirrors and diagnostics

    Raises:
        UnresolvedReferenceError: If an emitted sheet would contain a
            dangling ``var()`` reference
        pydantic.ValidationError: If ``options`` is an invalid mapping
    """
    if options is None:
        options = CompileOptions()
    elif not isinstance(options, CompileOptions):
        options = CompileOptions.model_validate(dict(options))

    ctx = CompileContext(options=options)
    docs = load_documents(documents, ctx.diagnostics)
    ingestion = ingest(docs)

    declarations, invalid = parse_declarations(options.custom_colors_text)
    for bad in invalid:
        ctx.diagnostics.add(
            DiagnosticKind.INVALID_CUSTOM_VARIABLE,
            f"Custom variable on line {bad.line} ignored ({bad.reason}): {bad.text}",
        )
    custom_colors = [d for d in declarations if _is_custom_primitive(d)]
    overrides = [d for d in declarations if not _is_custom_primitive(d)]

    _publish_custom_colors(ctx, custom_colors)
    supplied = extract_primitives(ingestion, ctx.namespace, ctx.diagnostics)
    add_baseline(ctx.namespace)
    add_category_fallbacks(ctx.namespace, supplied)
    if options.fill_missing_variants:
        fill_missing_steps(ctx.namespace)

    resolve_tokens(ingestion, ctx.namespace, ctx.tokens, ctx.diagnostics, options)
    ctx.primary = choose_primary(ctx.namespace, options, ctx.diagnostics)
    add_global_tokens(ctx.namespace, ctx.tokens, options, ctx.primary)
    _apply_declarations(ctx, overrides)
    _prune_dangling(ctx, {d.name for d in overrides})

    primitives_css = generate_primitives_css(ctx.namespace, options, ctx.primary)
    tokens_css = generate_tokens_css(ctx.tokens, options, ctx.primary)
    check_references(primitives_css, tokens_css)

    theme_json = None
    if options.include_theme_json:
        theme_json = build_theme_json(ctx.namespace, ctx.tokens)
        declared = declared_names(primitives_css) | declared_names(tokens_css)
        for warning in validate_theme_json(theme_json, declared):
            ctx.diagnostics.add(DiagnosticKind.INVALID_THEME_JSON, f"theme.json: {warning}")

    logger.info(
        f"Compiled {len(docs)} document(s): {len(ctx.namespace)} primitives, "
        f"{len(ctx.tokens)} tokens, {len(ctx.diagnostics)} diagnostics"
    )
    return CompileResult(
        primitives_css=primitives_css,
        tokens_css=tokens_css,
        primitives_json=primitives_to_json(ctx.namespace),
        tokens_json=tokens_to_json(ctx.tokens, options),
        theme_json=theme_json,
        diagnostics=list(ctx.diagnostics),
        primitives=list(ctx.namespace),
        tokens=list(ctx.tokens),
        primary=ctx.primary,
    )
