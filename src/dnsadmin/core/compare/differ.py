"""Unified diff rendering for change previews."""

from dataclasses import dataclass

EQUAL = " "
DELETE = "-"
INSERT = "+"

NO_NEWLINE_MARKER = "\\ No newline at end of file\n"


@dataclass(frozen=True)
class DiffOp:
    """One line of an edit script."""

    tag: str  # EQUAL, DELETE or INSERT
    line: str


class DiffGenerator:
    """
    Produce unified diffs between the current and proposed file content.

    Uses the linear-space variant of the Myers O(ND) shortest-edit-script
    algorithm, so the diff has the fewest possible inserted plus deleted
    lines and memory stays proportional to the input. Output is meant for human
    review before a save; it is never parsed back.
    """

    def __init__(self, context: int = 3):
        self.context = context

    def diff(self, label: str, original: str, modified: str) -> str:
        """Return a unified diff with ``a/<label>`` and ``b/<label>`` headers."""
        if original == modified:
            return ""

        ops = self.edit_script(
            original.splitlines(keepends=True),
            modified.splitlines(keepends=True),
        )
        hunks = self._render_hunks(ops)
        if not hunks:
            return ""

        return f"--- a/{label}\n+++ b/{label}\n" + "".join(hunks)

    # ========================================================================
    # Edit script
    # ========================================================================

    def edit_script(self, a: list[str], b: list[str]) -> list[DiffOp]:
        """Compute a minimal line edit script turning ``a`` into ``b``."""
        ops: list[DiffOp] = []
        self._diff_span(a, 0, len(a), b, 0, len(b), ops)
        return ops

    def _diff_span(
        self,
        a: list[str],
        a_lo: int,
        a_hi: int,
        b: list[str],
        b_lo: int,
        b_hi: int,
        ops: list[DiffOp],
    ) -> None:
        """Append the edit script for ``a[a_lo:a_hi]`` against ``b[b_lo:b_hi]``."""
        while a_lo < a_hi and b_lo < b_hi and a[a_lo] == b[b_lo]:
            ops.append(DiffOp(EQUAL, a[a_lo]))
            a_lo += 1
            b_lo += 1

        tail = a_hi
        while a_lo < a_hi and b_lo < b_hi and a[a_hi - 1] == b[b_hi - 1]:
            a_hi -= 1
            b_hi -= 1

        if a_lo == a_hi or b_lo == b_hi or set(a[a_lo:a_hi]).isdisjoint(b[b_lo:b_hi]):
            ops.extend(DiffOp(DELETE, line) for line in a[a_lo:a_hi])
            ops.extend(DiffOp(INSERT, line) for line in b[b_lo:b_hi])
        else:
            x, y = _middle_snake(a, a_lo, a_hi, b, b_lo, b_hi)
            self._diff_span(a, a_lo, x, b, b_lo, y, ops)
            self._diff_span(a, x, a_hi, b, y, b_hi, ops)

        ops.extend(DiffOp(EQUAL, line) for line in a[a_hi:tail])

    # ========================================================================
    # Rendering
    # ========================================================================

    def _render_hunks(self, ops: list[DiffOp]) -> list[str]:
        changes = [i for i, op in enumerate(ops) if op.tag != EQUAL]
        if not changes:
            return []

        # Line positions before each op, in the old and new file
        a_pos = [0]
        b_pos = [0]
        for op in ops:
            a_pos.append(a_pos[-1] + (op.tag != INSERT))
            b_pos.append(b_pos[-1] + (op.tag != DELETE))

        groups: list[tuple[int, int]] = []
        start = max(changes[0] - self.context, 0)
        end = min(changes[0] + self.context + 1, len(ops))
        for idx in changes[1:]:
            if idx - self.context <= end:
                end = min(idx + self.context + 1, len(ops))
            else:
                groups.append((start, end))
                start = max(idx - self.context, 0)
                end = min(idx + self.context + 1, len(ops))
        groups.append((start, end))

        hunks = []
        for start, end in groups:
            old_range = _format_range(a_pos[start], a_pos[end])
            new_range = _format_range(b_pos[start], b_pos[end])
            lines = [f"@@ -{old_range} +{new_range} @@\n"]
            for op in ops[start:end]:
                lines.append(op.tag + op.line)
                if not op.line.endswith("\n"):
                    lines.append("\n" + NO_NEWLINE_MARKER)
            hunks.append("".join(lines))
        return hunks


def _format_range(start: int, stop: int) -> str:
    """Format a hunk range the way GNU diff does (1-based, length omitted when 1)."""
    beginning = start + 1
    length = stop - start
    if length == 1:
        return f"{beginning}"
    if not length:
        beginning -= 1
    return f"{beginning},{length}"


def _middle_snake(
    a: list[str], a_lo: int, a_hi: int, b: list[str], b_lo: int, b_hi: int
) -> tuple[int, int]:
    """
    Find a split point on a shortest edit path between two line spans.

    Runs the Myers search forward from the top-left and backward from the
    bottom-right corner at the same time, keeping one V array per
    direction, until the paths overlap. Returns absolute ``(x, y)``
    indexes into ``a`` and ``b``.
    """
    n = a_hi - a_lo
    m = b_hi - b_lo
    max_d = (n + m + 1) // 2
    offset = max_d
    size = 2 * max_d
    forward = [-1] * size
    forward[offset + 1] = 0
    backward = forward[:]
    delta = n - m
    # With an odd delta the forward path is the one that meets the other
    front = delta % 2 != 0

    # Bounds on k that keep the search inside the edit graph
    f_start = f_end = b_start = b_end = 0

    for d in range(max_d):
        for k in range(-d + f_start, d + 1 - f_end, 2):
            i = offset + k
            if k == -d or (k != d and forward[i - 1] < forward[i + 1]):
                x = forward[i + 1]
            else:
                x = forward[i - 1] + 1
            y = x - k
            while x < n and y < m and a[a_lo + x] == b[b_lo + y]:
                x += 1
                y += 1
            forward[i] = x
            if x > n:
                f_end += 2
            elif y > m:
                f_start += 2
            elif front:
                j = offset + delta - k
                if 0 <= j < size and backward[j] != -1 and x >= n - backward[j]:
                    return a_lo + x, b_lo + y

        for k in range(-d + b_start, d + 1 - b_end, 2):
            j = offset + k
            if k == -d or (k != d and backward[j - 1] < backward[j + 1]):
                x = backward[j + 1]
            else:
                x = backward[j - 1] + 1
            y = x - k
            while x < n and y < m and a[a_hi - 1 - x] == b[b_hi - 1 - y]:
                x += 1
                y += 1
            backward[j] = x
            if x > n:
                b_end += 2
            elif y > m:
                b_start += 2
            elif not front:
                i = offset + delta - k
                if 0 <= i < size and forward[i] != -1:
                    fx = forward[i]
                    if fx >= n - x:
                        return a_lo + fx, b_lo + fx - (delta - k)

    # Only spans without a common line get here: delete all, then insert all
    return a_hi, b_lo


def generate_diff(label: str, original: str, modified: str) -> str:
    """Unified diff of ``original`` against ``modified`` for preview."""
    return DiffGenerator().diff(label, original, modified)
