"""
scoring/ - Pole Bid Scoring Engine

Modules:
    utils.py          - Decimal utilities
    weights.py        - Criterion weights, labels, base score
    snapshot.py       - Immutable engine input (BidSnapshot)
    pole_types.py     - Standard pole catalog (test-sheet grouping keys)
    parsing.py        - Raw form -> BidSnapshot adapter
    criteria.py       - Per-criterion bonus functions
    mechanical.py     - Test-sheet scoring and group averaging
    score_engine.py   - Weighted composition of the 14 criteria
"""
