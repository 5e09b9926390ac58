"""
Opsight: opportunity generation and scoring for process intelligence.
"""
