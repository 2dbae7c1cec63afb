"""
Indexing Schemes

Pure functions mapping a branch address (and history) to a table index.
The low two address bits are always dropped since instructions are
word aligned.
"""


ALIGNMENT_BITS = 2


class IndexingScheme:
    """
    Index derivation for each predictor table.
    """

    @staticmethod
    def low_bits(address: int, width: int) -> int:
        """Low `width` address bits after the alignment drop."""
        return (address >> ALIGNMENT_BITS) & ((1 << width) - 1)

    @staticmethod
    def bimodal(address: int, m2: int) -> int:
        """Bimodal index: address bits [m2+1:2]."""
        return IndexingScheme.low_bits(address, m2)

    @staticmethod
    def chooser(address: int, k: int) -> int:
        """Chooser index: address bits [k+1:2]."""
        return IndexingScheme.low_bits(address, k)

    @staticmethod
    def gshare(address: int, history: int, m1: int, n: int) -> int:
        """
        Gshare index.

        The n address bits just above the low (m1 - n) window are XORed
        with the history and placed on top of the low window.

        Args:
            address: Branch address
            history: Global history register value
            m1: Table exponent
            n: History width (n <= m1)
        """
        history_mask = (1 << n) - 1
        low_width = m1 - n

        pc_upper_n = (address >> (low_width + ALIGNMENT_BITS)) & history_mask
        folded = pc_upper_n ^ (history & history_mask)
        pc_lower = IndexingScheme.low_bits(address, low_width)

        return (folded << low_width) | pc_lower
