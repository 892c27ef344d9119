"""Pipeline stages: discovery, contig renaming, annotation, collection, pangenome."""
