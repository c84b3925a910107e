# coding: utf-8

"""
Interval union used to measure how much of a transcript structure is covered by another.
"""

from intervaltree import IntervalTree


class RangeRegistry:

    """
    Mutable union of closed genomic intervals. Overlapping or adjacent intervals
    are merged on registration, so that overlap queries never count a base twice.
    Coordinates are 1-based and inclusive; internally they are stored half-open.
    """

    def __init__(self):
        self.tree = IntervalTree()

    def __len__(self):
        return len(self.tree)

    def __iter__(self):
        for interval in sorted(self.tree):
            yield interval.begin, interval.end - 1

    def check_and_register(self, start: int, end: int):

        """
        Register the interval [start, end], merging it with any registered interval
        it overlaps or abuts.

        :param start: start of the interval (inclusive)
        :param end: end of the interval (inclusive)
        """

        if start > end:
            raise ValueError("Start greater than end: {0}\t{1}".format(start, end))
        self.tree.addi(start, end + 1)
        self.tree.merge_overlaps(strict=False)

    def overlap_size(self, start: int, end: int) -> int:

        """
        Number of bases of [start, end] covered by the registered intervals.

        :param start: start of the query interval (inclusive)
        :param end: end of the query interval (inclusive)
        :rtype: int
        """

        if start > end:
            raise ValueError("Start greater than end: {0}\t{1}".format(start, end))
        return sum(min(end + 1, interval.end) - max(start, interval.begin)
                   for interval in self.tree.overlap(start, end + 1))
