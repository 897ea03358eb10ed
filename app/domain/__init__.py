"""
Domain layer: grams, comments and users, plus the errors services raise.

Nothing in here knows about Flask or Kuzu.
"""
