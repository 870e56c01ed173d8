"""Storefront admin API."""
