"""Document exports: IFC file and PNG drawings."""
