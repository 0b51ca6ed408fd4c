"""
Member votes ("scrutins") and their official results.
"""

from bdl.scrutin.tally import VoteChoice, VoteTally

__all__ = ["VoteChoice", "VoteTally"]
