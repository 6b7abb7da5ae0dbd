"""
Parsing of git ref decorations.

Commit sources hand us ref text in `git log --format=%D` style, e.g.
``HEAD -> main, origin/main, origin/HEAD, tag: v1.0, feature``. Every
consumer (classifier, path builder, renderers) goes through this module
so that lane and color assignment see the same branch names.
"""

from collections.abc import Iterable

from gitlanes.constants import DEFAULT_REMOTES, HEAD_REF
from gitlanes.graph.types import ParsedRef, RefKind

SYMBOLIC_ARROW = " -> "
TAG_PREFIX = "tag:"


def _parse_name(text: str, remotes: Iterable[str]) -> ParsedRef | None:
    """Parse a single ref name that is not an arrow expression."""
    text = text.strip()
    if not text:
        return None

    if text.startswith(TAG_PREFIX):
        tag = text[len(TAG_PREFIX) :].strip()
        return ParsedRef(RefKind.TAG, tag) if tag else None

    if text == HEAD_REF:
        return ParsedRef(RefKind.SYMBOLIC_HEAD, HEAD_REF)

    remote, sep, rest = text.partition("/")
    if sep and remote in remotes:
        if not rest:
            return None
        if rest == HEAD_REF:
            return ParsedRef(RefKind.SYMBOLIC_HEAD, HEAD_REF, remote=remote)
        return ParsedRef(RefKind.REMOTE_TRACKING, rest, remote=remote)

    return ParsedRef(RefKind.LOCAL, text)


def parse_refs(raw: str | None, remotes: Iterable[str] = DEFAULT_REMOTES) -> tuple[ParsedRef, ...]:
    """
    Parse raw ref text into tagged refs.

    Empty or malformed text yields no refs; this never raises.

    Args:
        raw: Comma separated decorations
        remotes: Remote names whose prefix marks a remote-tracking branch

    Returns:
        Parsed refs in the order they appear
    """
    if not raw or not raw.strip():
        return ()

    remotes = tuple(remotes)
    parsed: list[ParsedRef] = []

    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue

        if SYMBOLIC_ARROW in item:
            # "HEAD -> main": the symbolic ref itself, then what it points to
            source, _, target = item.partition(SYMBOLIC_ARROW)
            target_ref = _parse_name(target, remotes)
            if target_ref is not None and target_ref.kind is RefKind.SYMBOLIC_HEAD:
                target_ref = None
            source_ref = _parse_name(source, remotes)
            if source_ref is not None:
                parsed.append(
                    ParsedRef(
                        RefKind.SYMBOLIC_HEAD,
                        source_ref.name,
                        remote=source_ref.remote,
                        target=target_ref.name if target_ref is not None else None,
                    )
                )
            if target_ref is not None:
                parsed.append(target_ref)
            continue

        ref = _parse_name(item, remotes)
        if ref is not None:
            parsed.append(ref)

    return tuple(parsed)


def branch_names(raw: str | None, remotes: Iterable[str] = DEFAULT_REMOTES) -> tuple[str, ...]:
    """
    Get the sorted, de-duplicated branch names carried by a commit.

    Remote-tracking refs contribute their name without the remote prefix,
    so ``origin/main`` and ``main`` are the same branch here. Tags and
    symbolic HEAD refs are dropped.
    """
    names = {
        ref.name
        for ref in parse_refs(raw, remotes)
        if ref.kind in (RefKind.LOCAL, RefKind.REMOTE_TRACKING)
    }
    return tuple(sorted(names))


def tag_names(raw: str | None, remotes: Iterable[str] = DEFAULT_REMOTES) -> tuple[str, ...]:
    """Get the tags carried by a commit, in order of appearance."""
    return tuple(ref.name for ref in parse_refs(raw, remotes) if ref.kind is RefKind.TAG)


def describe_refs(raw: str | None, remotes: Iterable[str] = DEFAULT_REMOTES) -> str:
    """
    Format a commit's decorations for display.

    Gives ``HEAD -> main, feature, tag: v1`` style text: the local HEAD
    first, then the branch names from `branch_names` (the one HEAD points
    to is not repeated), then the tags. Remote HEAD refs are left out.
    """
    remotes = tuple(remotes)
    parts: list[str] = []

    head = next(
        (
            ref
            for ref in parse_refs(raw, remotes)
            if ref.kind is RefKind.SYMBOLIC_HEAD and ref.remote is None
        ),
        None,
    )
    head_target = head.target if head is not None else None
    if head is not None:
        parts.append(f"{HEAD_REF}{SYMBOLIC_ARROW}{head_target}" if head_target else HEAD_REF)

    parts.extend(name for name in branch_names(raw, remotes) if name != head_target)
    parts.extend(f"{TAG_PREFIX} {tag}" for tag in tag_names(raw, remotes))
    return ", ".join(parts)


def primary_branch(labels: tuple[str, ...], main_branch: str | None) -> str | None:
    """
    Get the branch a commit is a tip of for lane purposes.

    A commit carrying the main branch is a main tip whatever else it
    carries; otherwise the first label wins.
    """
    if not labels:
        return None
    if main_branch is not None and main_branch in labels:
        return main_branch
    return labels[0]


def is_branch_tip(labels: tuple[str, ...], main_branch: str | None) -> bool:
    """True if the commit carries branch labels and none of them is the main branch."""
    return bool(labels) and (main_branch is None or main_branch not in labels)
