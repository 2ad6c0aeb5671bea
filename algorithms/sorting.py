"""
sorting.py — Comparison Sorts
==============================
Generator-based bubble, insertion and quick sort.  Each generator sorts
the list it is given IN PLACE and yields a Step after every atomic event:

  1. Compare two elements          →  StepKind.COMPARE
  2. Exchange two elements         →  StepKind.SWAP
  3. Pivot chosen (quick sort)     →  StepKind.PIVOT
  4. An index reaches its place    →  StepKind.MARK_SORTED
  5. Final step                    →  StepKind.DONE, every index sorted

Because the list is mutated in place and the generator only suspends
between whole comparisons / swaps, a consumer that stops pulling (the
cooperative cancellation in engine.stepper) leaves a valid permutation
of the input behind.

Insertion sort realises every "shift" as an adjacent swap so there is
never a moment where one value is duplicated and another lost.  Quick sort
skips exchanges that would not change the list (same index or equal
values), which makes a run over already-sorted input perform zero swaps.
"""

from typing import Generator, List, Tuple

from algorithms.step import Step, StepBuilder, StepKind


BUBBLE_PSEUDOCODE: List[str] = [
    "def bubble_sort(a):",                           # 0
    "    for i in 0 .. n-2:",                        # 1
    "        for j in 0 .. n-i-2:",                  # 2
    "            if a[j] > a[j+1]:",                 # 3
    "                swap(a[j], a[j+1])",            # 4
    "        mark a[n-1-i] sorted",                  # 5
]

INSERTION_PSEUDOCODE: List[str] = [
    "def insertion_sort(a):",                        # 0
    "    for i in 1 .. n-1:",                        # 1
    "        j ← i",                                 # 2
    "        while j > 0 and a[j-1] > a[j]:",        # 3
    "            swap(a[j-1], a[j])",                # 4
    "            j ← j - 1",                         # 5
    "        prefix a[0..i] is sorted",              # 6
]

QUICK_PSEUDOCODE: List[str] = [
    "def quick_sort(a, low, high):",                 # 0
    "    if low < high:",                            # 1
    "        pivot ← a[high]",                       # 2
    "        i ← low - 1",                           # 3
    "        for j in low .. high-1:",               # 4
    "            if a[j] < pivot:",                  # 5
    "                i ← i + 1; swap(a[i], a[j])",   # 6
    "        swap(a[i+1], a[high])",                 # 7
    "        quick_sort(a, low, i)",                 # 8
    "        quick_sort(a, i+2, high)",              # 9
]


# ---------------------------------------------------------------------------
# Bubble sort
# ---------------------------------------------------------------------------
def bubble_sort(values: List[int]) -> Generator[Step, None, None]:
    """Classic double loop; the last unsorted index is fixed after each pass."""
    a  = values
    n  = len(a)
    sb = StepBuilder(comparisons=0, swaps=0)

    sb.pseudocode_line = 0
    yield sb.emit(StepKind.START, "🫧 Starting Bubble Sort...", array=a)

    for i in range(n - 1):
        for j in range(n - i - 1):
            sb.compare(j, j + 1)
            sb.pseudocode_line = 3
            yield sb.emit(StepKind.COMPARE, f"Comparing {a[j]} and {a[j + 1]}", array=a)

            if a[j] > a[j + 1]:
                a[j], a[j + 1] = a[j + 1], a[j]
                sb.swap(j, j + 1)
                sb.pseudocode_line = 4
                yield sb.emit(StepKind.SWAP, f"✓ Swapped {a[j + 1]} and {a[j]}", array=a)

        sb.mark_sorted([n - 1 - i])
        sb.highlight()
        sb.pseudocode_line = 5
        yield sb.emit(StepKind.MARK_SORTED, "", array=a)

    yield from _finish(sb, a)


# ---------------------------------------------------------------------------
# Insertion sort
# ---------------------------------------------------------------------------
def insertion_sort(values: List[int]) -> Generator[Step, None, None]:
    """Grow a sorted prefix; each element sinks left one adjacent swap at a time."""
    a  = values
    n  = len(a)
    sb = StepBuilder(comparisons=0, swaps=0)

    sb.pseudocode_line = 0
    yield sb.emit(StepKind.START, "📌 Starting Insertion Sort...", array=a)
    if n:
        sb.mark_sorted([0])

    for i in range(1, n):
        sb.highlight(i)
        sb.pseudocode_line = 2
        yield sb.emit(StepKind.START, f"Inserting {a[i]} into sorted portion", array=a)

        j = i
        while j > 0:
            sb.compare(j - 1, j)
            sb.pseudocode_line = 3
            yield sb.emit(StepKind.COMPARE, f"Comparing {a[j - 1]} and {a[j]}", array=a)
            if a[j - 1] <= a[j]:
                break

            a[j - 1], a[j] = a[j], a[j - 1]
            sb.swap(j - 1, j)
            sb.pseudocode_line = 4
            yield sb.emit(StepKind.SWAP, f"Shifted {a[j]} right", array=a)
            j -= 1

        sb.mark_sorted([i])
        sb.highlight()
        sb.pseudocode_line = 6
        yield sb.emit(StepKind.MARK_SORTED, "", array=a)

    yield from _finish(sb, a)


# ---------------------------------------------------------------------------
# Quick sort (Lomuto partition, pivot = last element)
# ---------------------------------------------------------------------------
def quick_sort(values: List[int]) -> Generator[Step, None, None]:
    """
    The recursion of the pseudocode is driven from an explicit stack of
    (low, high, depth, line) frames, so a sorted input of any length
    partitions without growing the Python call stack.  The left range is
    pushed last and therefore finished first, as in the recursive form.
    """
    a  = values
    sb = StepBuilder(comparisons=0, swaps=0, max_depth=0)

    sb.pseudocode_line = 0
    yield sb.emit(StepKind.START, "⚡ Starting Quick Sort...", array=a)

    frames: List[Tuple[int, int, int, int]] = [(0, len(a) - 1, 0, 0)]
    while frames:
        low, high, depth, line = frames.pop()
        sb.pseudocode_line = line
        if low > high:
            continue
        if low == high:
            # a one-element range is already in place
            sb.mark_sorted([low])
            continue

        p = yield from _partition(a, low, high, depth, sb)
        frames.append((p + 1, high, depth + 1, 9))
        frames.append((low, p - 1, depth + 1, 8))

    yield from _finish(sb, a)


def _partition(a: List[int], low: int, high: int, depth: int, sb: StepBuilder) -> Generator[Step, None, int]:
    """Lomuto partition of a[low..high]; returns the pivot's final index."""
    sb.metrics["max_depth"] = max(sb.metrics.get("max_depth", 0), depth)
    pivot = a[high]
    sb.highlight(high)
    sb.pseudocode_line = 2
    yield sb.emit(StepKind.PIVOT, f"Pivot: {pivot} (depth {depth})", array=a, low=low, high=high, depth=depth)

    i = low - 1
    for j in range(low, high):
        sb.compare(j, high)
        sb.pseudocode_line = 5
        yield sb.emit(StepKind.COMPARE, f"Comparing {a[j]} with pivot {pivot}", array=a, low=low, high=high, depth=depth)

        if a[j] < pivot:
            i += 1
            if i != j:
                a[i], a[j] = a[j], a[i]
                sb.swap(i, j)
                sb.pseudocode_line = 6
                yield sb.emit(StepKind.SWAP, f"Swapped {a[j]} and {a[i]}", array=a, low=low, high=high, depth=depth)

    p = i + 1
    if p != high and a[p] != a[high]:
        a[p], a[high] = a[high], a[p]
        sb.swap(p, high)
        sb.pseudocode_line = 7
        yield sb.emit(StepKind.SWAP, f"Placed pivot {pivot} at index {p}", array=a, low=low, high=high, depth=depth)

    sb.mark_sorted([p])
    sb.highlight()
    yield sb.emit(StepKind.MARK_SORTED, "", array=a, low=low, high=high, depth=depth)
    return p


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------
def _finish(sb: StepBuilder, a: List[int]) -> Generator[Step, None, None]:
    sb.mark_sorted(range(len(a)))
    sb.highlight()
    yield sb.emit(StepKind.DONE, "✅ Sorting complete!", is_final=True, array=a)
