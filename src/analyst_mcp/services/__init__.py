# Services package
# Backend client, credential resolution, tool registry, resource proxy and dispatch
