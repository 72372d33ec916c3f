# Services package init
"""
Book API — Services Layer
=========================

What:  Handler logic sitting between routes (HTTP) and the Book contract.

Service Inventory:
    - BookService: id parsing, Book synthesis, contract-only create_book
"""
