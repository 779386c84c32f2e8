"""
CodeShelf Backend — Services Layer
====================================

Service Inventory:
    - validation.py:      field rules (trim, lowercase language, title length)
    - query.py:           SnippetFilter, the list predicate shared with the client
    - snippet_service.py: SnippetService, list/get/create/update/delete

Nothing is imported here, so `codeshelf.client` can use query.py without
creating a database engine.
"""
