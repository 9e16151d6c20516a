"""
Clients for the model service and the remote document store.
"""
