"""Review Store — items, reviews and comments behind bearer-token auth.

Users register and log in, create catalog items, review items and comment
on reviews. Reviews and comments can only be changed by the user who wrote
them.
"""

__version__ = "0.1.0"
