"""Service layer for mesh_operations_manager."""
