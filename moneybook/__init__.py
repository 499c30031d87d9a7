"""
Moneybook - Natural-Language Parsing Core

Turns free-text household-finance input (typed notes, pasted bank/card
notifications, receipt photos) into structured transaction and account
records for a personal account book (가계부).

DESIGN PRINCIPLES:
1. Classify before spending: off-topic input never reaches the LLM
2. The LLM proposes, the validator decides
3. Fail visibly with a message the user can read
4. The user confirms every account create/update
5. Providers and storage are swappable
"""

__version__ = "1.0.0"
__author__ = "Moneybook Team"
