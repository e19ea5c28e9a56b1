# Services package init
"""
Example API — Services Layer
==============================

What:  Business logic layer sitting between routes (HTTP) and the data it returns.
Why:   Routes handle HTTP, services handle the rules.

Service Inventory:
    - IdGenerator (abstract): Capability that hands out ids for new examples
    - RandomIdGenerator / SequenceIdGenerator: Random default and test stub
    - ExampleService: Example lookup and creation
"""
