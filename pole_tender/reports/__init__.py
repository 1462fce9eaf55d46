"""
reports/ - downloadable evaluation documents

Modules:
    evaluation_report.py  - Markdown report for one bid evaluation
"""
