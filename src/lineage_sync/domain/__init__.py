"""Domain layer: catalog element model, lineage events, ports and reconciliation."""
