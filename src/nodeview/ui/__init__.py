"""Server-rendered node list.

One page, rendered per request from the Consul catalog:
- web nodes first, the one serving this request highlighted
- every other node below
"""
