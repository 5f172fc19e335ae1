"""Raw metadata tree -> `Package` conversion (and back).

The extraction driver (`load.libsonnet`) emits a JSON tree that keeps only the
docsonnet-relevant keys of the evaluated entry file:

    {
      "#": {"name": "foo", "import": "...", "help": "..."},   # package marker
      "#new": {"function": {"help": "...", "args": [...]}},   # documented field
      "#spec": {"object": {"help": "..."}},                   # documented object ...
      "spec": {"#replicas": {"value": {...}}},                # ... and its children
      "util": {"#fn": {...}},                                 # undocumented nesting
      "nested": {"#": {...}, ...}                             # nested package
    }

Classification of mapping entries:

- key `#`: package marker; keys other than name/import/help become metadata
- key `#<name>`: a field; exactly one of `function`, `object`, `value`
- key `<name>` holding `#`: a nested package
- key `<name>` with a `#<name>` sibling: children of that documented object
  (a function or value sibling with children is an error)
- any other key `<name>`: an undocumented object that must contain fields

Anything else is a `TransformError`; nothing is silently dropped. Entries are
visited in tree order, so identical input always yields an identical model.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from docsonnet.core.errors import DocsonnetError
from docsonnet.core.model import Argument, Field, Function, Object, Package, Value

logger = logging.getLogger(__name__)

PACKAGE_MARKER = "#"
FIELD_PREFIX = "#"
FIELD_KINDS = ("function", "object", "value")

_PACKAGE_KEYS = ("name", "import", "help")


class TransformError(DocsonnetError, ValueError):
    """Raised when the raw metadata tree cannot be converted to a `Package`."""


class MalformedInput(TransformError):
    """The raw text is not a decodable tree, or a node has the wrong shape."""


class UnknownNodeKind(TransformError):
    """A mapping node carries no (or conflicting) recognized marker keys."""


# ----------------------------
# shape helpers
# ----------------------------


def _require_mapping(value: Any, *, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedInput(f"{where}: expected object, got {_json_type(value)}")
    return value


def _require_list(value: Any, *, where: str) -> list[Any]:
    if not isinstance(value, list):
        raise MalformedInput(f"{where}: expected array, got {_json_type(value)}")
    return value


def _require_str(value: Any, *, where: str) -> str:
    if not isinstance(value, str):
        raise MalformedInput(f"{where}: expected string, got {_json_type(value)}")
    return value


def _optional_str(value: Any, *, where: str) -> str | None:
    if value is None:
        return None
    return _require_str(value, where=where)


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def decode_raw(data: str | bytes) -> Any:
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedInput(f"raw metadata is not valid UTF-8: {e}") from e
    if not isinstance(data, str):
        raise TypeError(f"transform: expected str or bytes, got {type(data).__name__}")
    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise MalformedInput(f"raw metadata is not valid JSON: {e}") from e


# ----------------------------
# raw tree -> model
# ----------------------------


def transform(data: str | bytes) -> Package:
    """Convert the serialized raw metadata tree into the docsonnet object model.

    Raises:
        MalformedInput: undecodable input or a node of the wrong shape.
        UnknownNodeKind: a node whose marker keys are missing or conflicting.
    """
    root = _require_mapping(decode_raw(data), where="$")
    if PACKAGE_MARKER not in root:
        raise UnknownNodeKind("$: package declaration ('#') missing")
    pkg = _load_package(root, where="$")
    logger.debug("transformed package %r (%d fields, %d sub-packages)", pkg.name, len(pkg.api), len(pkg.sub))
    return pkg


def _load_package(d: dict[str, Any], *, where: str) -> Package:
    marker_where = f"{where}.#"
    marker = _require_mapping(d[PACKAGE_MARKER], where=marker_where)
    name = _require_str(marker.get("name"), where=f"{marker_where}.name")
    import_ = _optional_str(marker.get("import"), where=f"{marker_where}.import") or ""
    help_ = _optional_str(marker.get("help"), where=f"{marker_where}.help") or ""
    metadata = {k: v for k, v in marker.items() if k not in _PACKAGE_KEYS}

    api, sub = _load_members(d, where=where, allow_packages=True)
    return Package(name=name, import_=import_, help=help_, api=api, sub=sub, metadata=metadata)


def _load_members(
    d: dict[str, Any],
    *,
    where: str,
    allow_packages: bool,
) -> tuple[dict[str, Field], dict[str, Package]]:
    """Classify every entry of a package (or object) mapping."""
    api: dict[str, Field] = {}
    sub: dict[str, Package] = {}

    for key, raw in d.items():
        here = f"{where}.{key}"
        if key == PACKAGE_MARKER:
            if allow_packages:
                continue
            raise UnknownNodeKind(f"{here}: package declaration is only allowed on packages")

        node = _require_mapping(raw, where=here)

        if key.startswith(FIELD_PREFIX):
            name = key[len(FIELD_PREFIX):]
            api[name] = _load_field(name, node, parent=d, parent_where=where, where=here)
            continue

        if PACKAGE_MARKER in node:
            if not allow_packages:
                raise UnknownNodeKind(f"{here}: nested package inside an object")
            pkg = _load_package(node, where=here)
            if pkg.name in sub:
                raise UnknownNodeKind(f"{here}: duplicate sub-package name {pkg.name!r}")
            sub[pkg.name] = pkg
            continue

        sibling = d.get(FIELD_PREFIX + key)
        if sibling is not None:
            # only an object field owns the children stored under its name
            if not (isinstance(sibling, dict) and "object" in sibling):
                raise UnknownNodeKind(
                    f"{here}: {key!r} has documented children but {FIELD_PREFIX}{key} is not an object"
                )
            logger.debug("%s: described by sibling %s%s", here, FIELD_PREFIX, key)
            continue

        api[key] = _load_nested(key, node, where=here)

    return api, sub


def _load_field(
    name: str,
    node: dict[str, Any],
    *,
    parent: dict[str, Any],
    parent_where: str,
    where: str,
) -> Field:
    kinds = [k for k in FIELD_KINDS if k in node]
    if not kinds:
        raise UnknownNodeKind(f"{where}: field {name!r} lacks one of {{{' | '.join(FIELD_KINDS)}}}")
    if len(kinds) > 1:
        raise UnknownNodeKind(f"{where}: field {name!r} is ambiguous ({', '.join(kinds)})")

    kind = kinds[0]
    body = _require_mapping(node[kind], where=f"{where}.{kind}")
    if kind == "function":
        return _load_function(name, body, where=f"{where}.function")
    if kind == "value":
        return _load_value(name, body, where=f"{where}.value")
    return _load_object(
        name,
        body,
        children=parent.get(name),
        children_where=f"{parent_where}.{name}",
        where=f"{where}.object",
    )


def _load_value(name: str, d: dict[str, Any], *, where: str) -> Value:
    return Value(
        name=name,
        type=_require_str(d.get("type"), where=f"{where}.type"),
        help=_optional_str(d.get("help"), where=f"{where}.help") or "",
        default=d.get("default"),
    )


def _load_function(name: str, d: dict[str, Any], *, where: str) -> Function:
    raw_args = d.get("args")
    args: tuple[Argument, ...] = ()
    if raw_args is not None:
        items = _require_list(raw_args, where=f"{where}.args")
        args = tuple(_load_argument(item, where=f"{where}.args[{i}]") for i, item in enumerate(items))
    return Function(
        name=name,
        help=_optional_str(d.get("help"), where=f"{where}.help") or "",
        args=args,
    )


def _load_argument(raw: Any, *, where: str) -> Argument:
    d = _require_mapping(raw, where=where)
    enums = d.get("enums")
    if enums is not None:
        enums = tuple(_require_list(enums, where=f"{where}.enums"))
    return Argument(
        name=_require_str(d.get("name"), where=f"{where}.name"),
        type=_optional_str(d.get("type"), where=f"{where}.type"),
        default=d.get("default"),
        enums=enums,
    )


def _load_object(
    name: str,
    d: dict[str, Any],
    *,
    children: Any,
    children_where: str,
    where: str,
) -> Object:
    help_ = _optional_str(d.get("help"), where=f"{where}.help") or ""
    if children is None:
        return Object(name=name, help=help_)

    children = _require_mapping(children, where=children_where)
    fields, _ = _load_members(children, where=children_where, allow_packages=False)
    return Object(name=name, help=help_, fields=fields)


def _load_nested(name: str, d: dict[str, Any], *, where: str) -> Object:
    fields, _ = _load_members(d, where=where, allow_packages=False)
    if not fields:
        raise UnknownNodeKind(f"{where}: {name!r} is neither a field, a package, nor an object with fields")
    return Object(name=name, fields=fields)


# ----------------------------
# model -> raw tree
# ----------------------------


def _field_to_raw(f: Field) -> dict[str, Any]:
    if isinstance(f, Function):
        return {
            "function": {
                "help": f.help,
                "args": [
                    {
                        "name": a.name,
                        "type": a.type,
                        "default": a.default,
                        "enums": list(a.enums) if a.enums is not None else None,
                    }
                    for a in f.args
                ],
            }
        }
    if isinstance(f, Value):
        return {"value": {"help": f.help, "type": f.type, "default": f.default}}
    if isinstance(f, Object):
        return {"object": {"help": f.help}}
    raise TypeError(f"Unsupported field type: {type(f).__name__}")


def _fields_to_raw(fields: dict[str, Field]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for name, f in fields.items():
        out[FIELD_PREFIX + name] = _field_to_raw(f)
        if isinstance(f, Object) and f.fields:
            out[name] = _fields_to_raw(f.fields)
    return out


def package_to_raw(p: Package) -> dict[str, Any]:
    """Encode a `Package` as the raw metadata tree understood by `transform()`."""
    reserved = sorted(set(p.metadata) & set(_PACKAGE_KEYS))
    if reserved:
        raise ValueError(f"package {p.name!r}: metadata keys {reserved} collide with the package declaration")
    out: dict[str, Any] = {
        PACKAGE_MARKER: {"name": p.name, "import": p.import_, "help": p.help, **p.metadata},
    }
    out.update(_fields_to_raw(p.api))
    for sub in p.sub.values():
        out[sub.name] = package_to_raw(sub)
    return out


def serialize(p: Package) -> str:
    """Serialize a `Package` to raw metadata text (inverse of `transform()`)."""
    return json.dumps(package_to_raw(p), indent=2) + "\n"


# ----------------------------
# model -> JSON-ready dict
# ----------------------------


def field_to_dict(f: Field) -> dict[str, Any]:
    if isinstance(f, Function):
        body: dict[str, Any] = {
            "name": f.name,
            "help": f.help,
            "args": [
                {"name": a.name, "type": a.type, "default": a.default, "enums": None if a.enums is None else list(a.enums)}
                for a in f.args
            ],
        }
    elif isinstance(f, Object):
        body = {"name": f.name, "help": f.help, "fields": {k: field_to_dict(v) for k, v in f.fields.items()}}
    elif isinstance(f, Value):
        body = {"name": f.name, "help": f.help, "type": f.type, "default": f.default}
    else:
        raise TypeError(f"Unsupported field type: {type(f).__name__}")
    return {f.kind: body}


def package_to_dict(p: Package) -> dict[str, Any]:
    """Convert a `Package` to a JSON-ready dict of the object model."""
    out: dict[str, Any] = {"name": p.name, "import": p.import_, "help": p.help}
    if p.metadata:
        out["metadata"] = dict(p.metadata)
    out["api"] = {k: field_to_dict(v) for k, v in p.api.items()}
    out["sub"] = {k: package_to_dict(v) for k, v in p.sub.items()}
    return out


__all__ = [
    "FIELD_KINDS",
    "MalformedInput",
    "TransformError",
    "UnknownNodeKind",
    "decode_raw",
    "field_to_dict",
    "package_to_dict",
    "package_to_raw",
    "serialize",
    "transform",
]
