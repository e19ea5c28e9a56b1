# Routes package init
"""
Example API — API Routes Package
==================================

Route Inventory:
    - examples.py:  GET  /api/examples/{id}   (fetch the built-in example)
                    POST /api/examples        (create an example)

Routes stay THIN: extract data from the request, call ExampleService,
let the global exception handlers format errors.
"""
