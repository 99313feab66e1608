"""
Typed KSeF API endpoint functions, grouped by resource.
"""
