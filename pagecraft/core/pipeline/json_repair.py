"""
Response repair for model JSON output.

Coerces a hosted model's text response into a task's pydantic result model.
Hosted models do not guarantee well-formed JSON even when asked for a schema,
so a ladder of repairs is attempted in order, stopping at the first candidate
that parses and validates:

1. parse as-is
2. strip markdown code fences
3. extract the first balanced {...} object, then the widest {...} span
4. truncation repair (close a dangling string, or cut back to the last
   complete member) and close every open container
5. re-escape raw control characters and stray backslashes in strings
6. regex-extract known field values into a minimal partial result

Truncation points are found with a small scanner that tracks container depth
and string-escape state instead of guessing from the last `",`.

Dependencies: json, re (stdlib), pydantic
System role: Response Repairer stage of the model task pipeline
"""

import json
import logging
import re
from dataclasses import dataclass
from inspect import isclass
from typing import Any, Generic, Iterator, TypeVar, get_origin

from pydantic import AliasChoices, BaseModel, ValidationError
from pydantic.fields import FieldInfo

from pagecraft.core.exceptions import ResponseRepairError
from pagecraft.observability.log_utils import log_with_context, safe_log_value

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

CODE_FENCE = re.compile(r"```(?:json|JSON)?[ \t]*\n?")
OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")
STRING_LITERAL = re.compile(r'"((?:[^"\\]|\\.)*)"', re.DOTALL)
VALID_ESCAPES = frozenset('"\\/bfnrt')
UNICODE_ESCAPE = re.compile(r"[0-9a-fA-F]{4}")
CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


@dataclass(frozen=True)
class RepairResult(Generic[T]):
    """
    Outcome of a repair run.

    Attributes:
        value: Validated result model
        strategy: Ladder step that produced the value
        partial: True when content may have been lost (truncation or fragments)
    """

    value: T
    strategy: str
    partial: bool = False


@dataclass
class _ScanState:
    stack: list[str]
    in_string: bool
    string_is_key: bool
    pending_escape: bool
    last_cut: tuple[int, tuple[str, ...]] | None
    closed_at: int | None


def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers."""
    return CODE_FENCE.sub("", text).strip()


def escape_control_characters(text: str) -> str:
    """
    Escape raw control characters and stray backslashes inside string literals.

    Args:
        text: JSON-like text

    Returns:
        str: Text with string literals made JSON-safe
    """
    out: list[str] = []
    in_string = False
    i = 0
    length = len(text)

    while i < length:
        ch = text[i]
        if not in_string:
            if ch == '"':
                in_string = True
            out.append(ch)
            i += 1
            continue

        if ch == "\\":
            nxt = text[i + 1] if i + 1 < length else ""
            if nxt and nxt in VALID_ESCAPES:
                out.append(ch + nxt)
                i += 2
                continue
            if nxt == "u" and UNICODE_ESCAPE.fullmatch(text, i + 2, i + 6):
                out.append(text[i:i + 6])
                i += 6
                continue
            out.append("\\\\")
        elif ch == '"':
            in_string = False
            out.append(ch)
        elif ch in CONTROL_ESCAPES:
            out.append(CONTROL_ESCAPES[ch])
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
        i += 1

    return "".join(out)


def _closers(stack: tuple[str, ...] | list[str]) -> str:
    return "".join("}" if opener == "{" else "]" for opener in reversed(stack))


def _scan(text: str) -> _ScanState:
    stack: list[str] = []
    expecting_key: list[bool] = []
    in_string = False
    string_is_key = False
    escape = False
    last_cut: tuple[int, tuple[str, ...]] | None = None

    for i, ch in enumerate(text):
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
                if not string_is_key:
                    last_cut = (i + 1, tuple(stack))
            continue

        if ch == '"':
            in_string = True
            string_is_key = bool(stack) and stack[-1] == "{" and expecting_key[-1]
        elif ch in "{[":
            stack.append(ch)
            expecting_key.append(ch == "{")
            last_cut = (i + 1, tuple(stack))
        elif ch in "}]":
            if not stack:
                break
            stack.pop()
            expecting_key.pop()
            if not stack:
                return _ScanState([], False, False, False, last_cut, closed_at=i + 1)
            last_cut = (i + 1, tuple(stack))
        elif ch == ":" and stack and stack[-1] == "{":
            expecting_key[-1] = False
        elif ch == "," and stack:
            last_cut = (i, tuple(stack))
            if stack[-1] == "{":
                expecting_key[-1] = True

    return _ScanState(stack, in_string, string_is_key, escape, last_cut, closed_at=None)


def first_object(text: str) -> str | None:
    """Return the first balanced {...} span in text, or None if it never closes."""
    if "{" not in text:
        return None
    start = text[text.index("{"):]
    closed_at = _scan(start).closed_at
    return start[:closed_at] if closed_at is not None else None


def truncation_candidates(text: str) -> list[str]:
    """
    Build closed-up variants of a truncated JSON object.

    Args:
        text: JSON text starting with '{' that may be cut short

    Returns:
        list[str]: Candidates in preference order (most content first)
    """
    state = _scan(text)
    if state.closed_at is not None:
        # Object closed early; anything after it is trailing chatter
        return [text[:state.closed_at]]
    if not state.stack:
        return []

    candidates: list[str] = []
    if state.in_string and not state.string_is_key:
        body = text[:-1] if state.pending_escape else text
        candidates.append(body + '"' + _closers(state.stack))
    elif not state.in_string:
        candidates.append(text.rstrip().rstrip(",") + _closers(state.stack))

    if state.last_cut is not None:
        pos, snapshot = state.last_cut
        candidates.append(text[:pos].rstrip().rstrip(",") + _closers(snapshot))

    return list(dict.fromkeys(candidates))


def _decode_fragment(fragment: str) -> str:
    try:
        return json.loads(f'"{fragment}"', strict=False)
    except ValueError:
        return (
            fragment.replace("\\n", "\n")
            .replace("\\t", "\t")
            .replace('\\"', '"')
            .replace("\\\\", "\\")
        )


def _wire_keys(name: str, field: FieldInfo) -> list[str]:
    keys: list[str] = []
    alias = field.validation_alias
    if isinstance(alias, AliasChoices):
        keys.extend(choice for choice in alias.choices if isinstance(choice, str))
    elif isinstance(alias, str):
        keys.append(alias)
    for candidate in (field.alias, field.serialization_alias, name):
        if candidate:
            keys.append(candidate)
    return list(dict.fromkeys(keys))


def _extract_string(raw: str, keys: list[str]) -> str | None:
    for key in keys:
        match = re.search(rf'"{re.escape(key)}"\s*:\s*"((?:[^"\\]|\\.)*)', raw, re.DOTALL)
        if match:
            return _decode_fragment(match.group(1))
    return None


def _extract_string_list(raw: str, keys: list[str]) -> list[str] | None:
    for key in keys:
        match = re.search(rf'"{re.escape(key)}"\s*:\s*\[(.*?)(?:\]|$)', raw, re.DOTALL)
        if match:
            return [_decode_fragment(item) for item in STRING_LITERAL.findall(match.group(1))]
    return None


def extract_fragments(raw: str, result_model: type[BaseModel]) -> dict[str, Any]:
    """
    Pull individual known field values out of an unparseable response.

    Args:
        raw: Raw model response
        result_model: Pydantic model whose fields are searched for

    Returns:
        dict: Field name to recovered value, for the fields that were found
    """
    fragments: dict[str, Any] = {}
    for name, field in result_model.model_fields.items():
        keys = _wire_keys(name, field)
        annotation = field.annotation

        if annotation is str:
            value = _extract_string(raw, keys)
        elif get_origin(annotation) is list:
            value = _extract_string_list(raw, keys)
        elif isclass(annotation) and issubclass(annotation, BaseModel):
            value = extract_fragments(raw, annotation) or None
        else:
            value = None

        if value is not None:
            fragments[name] = value
    return fragments


class ResponseRepairer:
    """Runs the repair ladder against a task's result model."""

    def repair(self, raw: str | None, result_model: type[T]) -> RepairResult[T]:
        """
        Coerce a raw response into the result model.

        Args:
            raw: Raw text returned by the model
            result_model: Pydantic model the response must validate against

        Returns:
            RepairResult: Validated value with the strategy that produced it

        Raises:
            ResponseRepairError: If every strategy, including fragment extraction, fails
        """
        if raw is None or not raw.strip():
            raise ResponseRepairError("Empty model response", response_preview="")

        for strategy, candidate, partial in self._candidates(raw):
            value = self._validate(candidate, result_model)
            if value is not None:
                if strategy != "as_is":
                    logger.warning(
                        f"{__name__}:repair - Recovered response via {strategy}",
                        extra={"strategy": strategy, "partial": partial, "response_length": len(raw)},
                    )
                return RepairResult(value=value, strategy=strategy, partial=partial)

        fragments = extract_fragments(raw, result_model)
        if fragments:
            try:
                value = result_model.model_validate(fragments)
            except ValidationError as e:
                logger.debug(f"{__name__}:repair - Fragments did not validate: {e}")
            else:
                logger.warning(
                    f"{__name__}:repair - Using partial response fragments",
                    extra={"fields": sorted(fragments), "response_length": len(raw)},
                )
                return RepairResult(value=value, strategy="fragments", partial=True)

        log_with_context(
            logger,
            logging.ERROR,
            f"{__name__}:repair - All repair strategies failed",
            response_length=len(raw),
            response_preview=safe_log_value(raw, max_length=200),
        )
        raise ResponseRepairError(
            f"Invalid JSON response for {result_model.__name__}",
            response_preview=raw[:200],
        )

    def _candidates(self, raw: str) -> Iterator[tuple[str, str, bool]]:
        yield "as_is", raw, False

        cleaned = strip_code_fences(raw)
        yield "strip_fences", cleaned, False

        balanced = first_object(cleaned)
        if balanced is not None and balanced != cleaned:
            yield "extract_object", balanced, False

        if not cleaned.startswith("{"):
            match = OBJECT_SPAN.search(cleaned)
            if match:
                cleaned = match.group(0)
                if cleaned != balanced:
                    yield "extract_object", cleaned, False
            elif "{" in cleaned:
                cleaned = cleaned[cleaned.index("{"):]

        if not cleaned.endswith("}"):
            for candidate in truncation_candidates(cleaned):
                yield "truncation", candidate, True

        escaped = escape_control_characters(cleaned)
        if escaped != cleaned:
            yield "escape_controls", escaped, False
            if not escaped.endswith("}"):
                for candidate in truncation_candidates(escaped):
                    yield "escape_controls_truncation", candidate, True

    @staticmethod
    def _validate(candidate: str, result_model: type[T]) -> T | None:
        try:
            data = json.loads(candidate)
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        try:
            return result_model.model_validate(data)
        except ValidationError:
            return None
