"""
Persistence of curl logs and run summaries.
"""
