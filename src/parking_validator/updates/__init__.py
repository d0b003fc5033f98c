"""
Pending field-update queue checks.

Kept apart from the validation pipeline: it only reads the parking
dataset to learn which location names exist, and otherwise works on its
own queue file.
"""
