"""
validation/ - advisory form feedback

Modules:
    field_rules.py  - Range rules and FieldKey-keyed validation messages
"""
