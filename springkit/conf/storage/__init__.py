"""Key path parsing and tree-checked flat storage for properties."""