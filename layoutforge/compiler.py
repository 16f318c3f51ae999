"""LayoutForge compiler.

Drives one layout tree through the whole flow:

1. RESOLVE  -- merge named style documents into every node.
2. DISPATCH -- walk the tree depth-first and hand each property to the
   handler registered for the node's type.
3. ASSEMBLE -- join the fragments of every component into a modifier chain
   (declarative) or a statement sequence (imperative).
4. RENDER   -- wrap the assembled code in a source file template.

:meth:`LayoutCompiler.compile_files` runs many files concurrently, sharing
the run's style cache, and skips files the build cache reports unchanged.

Usage::

    compiler = LayoutCompiler(CompilerConfig(mode=OutputMode.IMPERATIVE))
    layout = compiler.compile_file("Layouts/profile.json")
    print(layout.text)

    results = await compiler.compile_files()
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field

from layoutforge.cache import BuildCache
from layoutforge.codegen.assembler import CodeAssembler, CompiledUnit
from layoutforge.codegen.templates import (
    DECLARATIVE_TEMPLATE,
    IMPERATIVE_TEMPLATE,
    TemplateRenderer,
    write_file,
)
from layoutforge.codegen.zorder import ZPlacement, plan_siblings
from layoutforge.config import CompilerConfig, OutputMode
from layoutforge.context import CompilationContext
from layoutforge.diagnostics import Diagnostic, DiagnosticCode
from layoutforge.errors import CompileError, LayoutForgeError, LayoutParseError
from layoutforge.handlers.base import ComponentScope, Fragment, Handler, PropertySite
from layoutforge.handlers.containers import IncludeHandler
from layoutforge.layout.loader import load_layout, parse_layout, view_name_for
from layoutforge.layout.models import (
    ComponentNode,
    DataDeclaration,
    ListValue,
    Scalar,
    contains_binding,
    walk,
)
from layoutforge.styles.resolver import StyleResolver
from layoutforge.utils import indent_lines, swift_string, to_camel, to_pascal

CHILD_INDENT = 4

ALL_GROUP = "all"
DEFAULT_GROUP = ""


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class CompiledLayout:
    """Everything produced for one layout tree."""

    source: str
    view_name: str
    mode: OutputMode
    text: str
    units: list[CompiledUnit] = field(default_factory=list)
    styles_used: list[str] = field(default_factory=list)

    @property
    def output_name(self) -> str:
        """File name of the generated source."""
        if self.mode is OutputMode.DECLARATIVE:
            return f"{self.view_name}View.swift"
        return f"{self.view_name}Binding.swift"


class FileStatus(str, Enum):
    OK = "ok"
    SKIPPED = "skipped"
    ERROR = "error"


class FileResult(BaseModel):
    """Outcome of compiling one file inside :meth:`LayoutCompiler.compile_files`."""

    source: str = Field(..., description="Layout file path")
    status: FileStatus = Field(..., description="ok, skipped (unchanged) or error")
    output_path: Optional[str] = Field(default=None, description="Generated file")
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    error: Optional[str] = Field(default=None, description="Fatal error message")

    @property
    def produced_output(self) -> bool:
        return self.status is not FileStatus.ERROR


# ---------------------------------------------------------------------------
# Imperative collection helpers
# ---------------------------------------------------------------------------


@dataclass
class _PartialBinding:
    include: str
    property_name: str
    binding_class: str
    groups: tuple[str, ...] = ()


def binding_groups(node: ComponentNode) -> list[str]:
    """Named binding groups a node declares via ``binding_group``."""
    value = node.get("binding_group")
    if isinstance(value, Scalar) and isinstance(value.value, str):
        return [value.value]
    if isinstance(value, ListValue):
        return [
            item.value
            for item in value.items
            if isinstance(item, Scalar) and isinstance(item.value, str)
        ]
    return []


def invalidate_method_name(group: str) -> str:
    """``all`` -> ``invalidateAll``, ``""`` -> ``invalidate``, ``user_info`` -> ``invalidateUserInfo``."""
    if group == ALL_GROUP:
        return "invalidateAll"
    return f"invalidate{to_pascal(group)}"


def data_variable(declaration: DataDeclaration) -> dict[str, Any]:
    """Template context for one stored data property."""
    default = declaration.default_value
    if default is None:
        return {"name": declaration.name, "type": f"{declaration.class_name}?", "default": None}
    if declaration.class_name == "String":
        if len(default) >= 2 and default[0] == default[-1] and default[0] in "\"'":
            default = default[1:-1]
        default = swift_string(default)
    elif declaration.class_name == "Bool":
        default = default.lower()
    return {"name": declaration.name, "type": declaration.class_name, "default": default}


# ---------------------------------------------------------------------------
# Compiler
# ---------------------------------------------------------------------------


class LayoutCompiler:
    """Compiles layout trees for one output mode.

    Attributes:
        ctx: The run's compilation context (config, styles, diagnostics).
        renderer: Jinja2 renderer for the final source files.
    """

    def __init__(
        self,
        config: Optional[CompilerConfig] = None,
        mode: Optional[OutputMode] = None,
        ctx: Optional[CompilationContext] = None,
    ) -> None:
        self.ctx = ctx or CompilationContext(config, mode)
        self.config = self.ctx.config
        self.renderer = TemplateRenderer()
        self.assembler = CodeAssembler(self.ctx.mode)

    # ------------------------------------------------------------------
    # Single tree / file
    # ------------------------------------------------------------------

    def compile_tree(
        self, root: ComponentNode, view_name: str = "Layout", source: str = ""
    ) -> CompiledLayout:
        """Resolve, dispatch, assemble and render one tree."""
        resolver = StyleResolver(self.ctx, source)
        resolved = resolver.resolve(root)

        if self.ctx.declarative:
            units: list[CompiledUnit] = []
            body = self._compile_declarative(resolved, source, None, units)
            text = self.renderer.render(
                DECLARATIVE_TEMPLATE,
                {
                    "view_name": view_name,
                    "source_name": Path(source).name if source else "<string>",
                    "body": body,
                },
            )
        else:
            units, context = self._compile_imperative(resolved, source)
            context.update(
                view_name=view_name,
                binding_class=f"{view_name}Binding",
                super_class=self.config.binding_super_class,
                source_name=Path(source).name if source else "<string>",
            )
            text = self.renderer.render(IMPERATIVE_TEMPLATE, context)

        return CompiledLayout(
            source=source,
            view_name=view_name,
            mode=self.ctx.mode,
            text=text,
            units=units,
            styles_used=list(resolver.styles_used),
        )

    def compile_text(
        self, text: str, view_name: str = "Layout", source: str = "<string>"
    ) -> CompiledLayout:
        """Parse layout JSON *text* and compile it.

        Raises:
            LayoutParseError: If *text* is not a JSON object.
        """
        return self.compile_tree(parse_layout(text, source), view_name, source)

    def compile_file(self, path: str | Path) -> CompiledLayout:
        """Load and compile one layout file.

        Raises:
            LayoutParseError: If the file cannot be read or parsed.
        """
        file_path = Path(path)
        root = load_layout(file_path)
        return self.compile_tree(root, view_name_for(file_path), str(file_path))

    # ------------------------------------------------------------------
    # Declarative mode
    # ------------------------------------------------------------------

    def _compile_declarative(
        self,
        node: ComponentNode,
        source: str,
        placement: Optional[ZPlacement],
        units: list[CompiledUnit],
    ) -> list[str]:
        """Compile *node* and its subtree; units are collected children first."""
        handler = self._handler_for(node, source)
        children = node.view_children()
        placements = plan_siblings(children, self.ctx, source)

        body: list[str] = []
        for index, child in enumerate(children):
            child_lines = self._compile_declarative(child, source, placements.get(index), units)
            body.extend(indent_lines(child_lines, CHILD_INDENT))

        scope = ComponentScope(
            view_name=to_camel(node.id) if node.id else "",
            placement=placement,
        )
        fragments = self._fragments(handler, node, scope)
        unit = self.assembler.assemble(
            node,
            fragments,
            head=handler.construct(node, body, self.ctx),
            view_name=scope.view_name,
        )
        units.append(unit)
        return unit.lines

    # ------------------------------------------------------------------
    # Imperative mode
    # ------------------------------------------------------------------

    def _compile_imperative(
        self, root: ComponentNode, source: str
    ) -> tuple[list[CompiledUnit], dict[str, Any]]:
        units: list[CompiledUnit] = []
        weak_vars: list[dict[str, str]] = []
        partials: list[_PartialBinding] = []
        groups: dict[str, list[CompiledUnit]] = {ALL_GROUP: [], DEFAULT_GROUP: []}

        for node in walk(root):
            if node.is_data_declaration:
                continue
            if node.type_key == "include":
                self._track_partial(node, partials)
                continue

            handler = self._handler_for(node, source)
            if node.id is not None:
                weak_vars.append(
                    {
                        "name": to_camel(node.id),
                        "view_class": handler.view_class,
                        "id": swift_string(node.id),
                    }
                )

            if not any(contains_binding(v) for v in node.properties.values()):
                continue
            if node.id is None:
                self.ctx.warn(
                    DiagnosticCode.MISSING_VIEW_ID,
                    f"'{node.type or '<untyped>'}' has bindings but no id; skipped",
                    source,
                )
                continue

            scope = ComponentScope(view_name=to_camel(node.id))
            unit = self.assembler.assemble(
                node, self._fragments(handler, node, scope), view_name=scope.view_name
            )
            if unit.empty:
                continue
            units.append(unit)
            for group in [ALL_GROUP, *(binding_groups(node) or [DEFAULT_GROUP])]:
                groups.setdefault(group, []).append(unit)

        methods = []
        for group, members in groups.items():
            methods.append(
                {
                    "name": invalidate_method_name(group),
                    "partial_calls": self._partial_calls(group, partials),
                    "body": [line for unit in members for line in unit.lines],
                }
            )

        context = {
            "data_vars": [data_variable(d) for d in self._data_declarations(root)],
            "weak_vars": weak_vars,
            "partials": partials,
            "methods": methods,
        }
        return units, context

    @staticmethod
    def _data_declarations(root: ComponentNode) -> list[DataDeclaration]:
        """Data fields declared on the root or by its direct children."""
        declarations = list(root.data)
        for child in root.iter_children():
            if child.is_data_declaration:
                declarations.extend(child.data)
        seen: set[str] = set()
        unique = []
        for declaration in declarations:
            if declaration.name not in seen:
                seen.add(declaration.name)
                unique.append(declaration)
        return unique

    def _track_partial(self, node: ComponentNode, partials: list[_PartialBinding]) -> None:
        include = IncludeHandler.include_path(node)
        if not include or any(p.include == include for p in partials):
            return
        base = include.rsplit("/", 1)[-1]
        partials.append(
            _PartialBinding(
                include=include,
                property_name=to_camel(base),
                binding_class=f"{to_pascal(base)}Binding",
                groups=self._partial_groups(include),
            )
        )

    def _partial_groups(self, include: str) -> tuple[str, ...]:
        """Binding groups the included layout declares, if it can be read."""
        layouts_dir = self.config.layouts_dir
        if not layouts_dir.is_absolute():
            layouts_dir = self.config.project_dir / layouts_dir
        path = layouts_dir / f"{include}.json"
        if not path.is_file():
            return ()
        try:
            partial_root = load_layout(path)
        except LayoutParseError:
            return ()
        found: list[str] = []
        for node in walk(partial_root):
            for group in binding_groups(node):
                if group not in found:
                    found.append(group)
        return tuple(found)

    @staticmethod
    def _partial_calls(group: str, partials: list[_PartialBinding]) -> list[str]:
        if group == DEFAULT_GROUP:
            return []
        method = invalidate_method_name(group)
        return [
            f"{p.property_name}Binding.{method}(resetForm: resetForm, formInitialized: formInitialized)"
            for p in partials
            if group == ALL_GROUP or group in p.groups
        ]

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _handler_for(self, node: ComponentNode, source: str) -> Handler:
        registry = self.ctx.registry
        if not registry.is_registered(node.type):
            self.ctx.warn(
                DiagnosticCode.UNKNOWN_COMPONENT_TYPE,
                f"Unknown component type '{node.type or '<untyped>'}'; "
                "only common properties are supported",
                source,
            )
        return registry.get_handler(node.type)

    def _fragments(
        self, handler: Handler, node: ComponentNode, scope: ComponentScope
    ) -> list[Fragment]:
        """Property fragments in source order, then the handler's finalizers."""
        fragments: list[Fragment] = []
        for key, value in node.properties.items():
            if not self.ctx.declarative and not contains_binding(value):
                continue
            site = PropertySite(node=node, key=key, value=value, ctx=self.ctx, scope=scope)
            fragments.extend(handler.dispatch(site))
        fragments.extend(handler.finalize(scope, self.ctx))
        return fragments

    # ------------------------------------------------------------------
    # Many files
    # ------------------------------------------------------------------

    def discover(self) -> list[Path]:
        """Every ``*.json`` layout under the configured layouts directory."""
        layouts_dir = self.config.layouts_dir
        if not layouts_dir.is_absolute():
            layouts_dir = self.config.project_dir / layouts_dir
        if not layouts_dir.is_dir():
            return []
        return sorted(p for p in layouts_dir.rglob("*.json") if p.is_file())

    async def compile_files(
        self, paths: Optional[Iterable[str | Path]] = None
    ) -> list[FileResult]:
        """Compile *paths* (default: :meth:`discover`) concurrently.

        Each file compiles in a worker thread; at most
        ``config.max_parallel_files`` run at once.  A file that fails is
        recorded in its :class:`FileResult` and the others carry on.

        Every call is a new run: style documents are re-read and
        :attr:`ctx` holds only this run's diagnostics.

        Returns:
            One result per input file, in input order.
        """
        self.ctx = self.ctx.new_run()
        files =[Path(p) for p in paths] if paths is not None else self.discover()
        cache = BuildCache.load(self.config.build_cache_path) if self.config.use_build_cache else None
        semaphore = asyncio.Semaphore(self.config.max_parallel_files)

        async def _compile(path: Path) -> FileResult:
            async with semaphore:
                return await asyncio.to_thread(self._compile_one, path, cache)

        results = await asyncio.gather(*(_compile(p) for p in files))

        if cache is not None:
            await cache.save()
        return list(results)

    def _compile_one(self, path: Path, cache: Optional[BuildCache]) -> FileResult:
        source = str(path)
        try:
            if cache is not None:
                digest = cache.fingerprint_for(path, self.ctx)
                if cache.is_fresh(source, digest):
                    return FileResult(
                        source=source,
                        status=FileStatus.SKIPPED,
                        output_path=cache.output_for(source),
                    )
            layout = self.compile_file(path)
            output = self.config.output_dir / layout.output_name
            write_file(output, layout.text)
        except LayoutForgeError as exc:
            return self._failed(source, str(exc))
        except Exception as exc:
            return self._failed(source, str(CompileError(source, f"unexpected failure: {exc}")))

        if cache is not None:
            cache.record(
                source,
                cache.fingerprint_for(path, self.ctx, layout.styles_used),
                layout.styles_used,
                str(output),
            )
        return FileResult(
            source=source,
            status=FileStatus.OK,
            output_path=str(output),
            diagnostics=self.ctx.diagnostics_for(source),
        )

    def _failed(self, source: str, message: str) -> FileResult:
        return FileResult(
            source=source,
            status=FileStatus.ERROR,
            error=message,
            diagnostics=self.ctx.diagnostics_for(source),
        )
