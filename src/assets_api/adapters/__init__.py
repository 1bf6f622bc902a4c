"""
Adapter layer for the Assets API.

Contains the gateways to the object store (S3) and the metadata store (DynamoDB).
Each gateway is built once per application and handed to the routers as a dependency.
"""
