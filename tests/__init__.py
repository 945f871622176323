"""
Analyst MCP Bridge Test Suite

The tests exercise the dispatch core without a live backend:
- Backend client behaviour against a fake HTTP transport
- Credential resolution in each deployment mode
- Tool catalog request mapping and required-argument checks
- Dispatcher reshaping, including diagram extraction
- Resource proxy listing and lookup
"""
