"""
Opsight service layer.

Services sit between the embedding application and the engines: they build
RunContexts and pick the configured engine instance.
"""
