"""
repositories/ - Data Access Layer
==================================
Each repository holds the SQL for one table (account, game, stream) and runs
it through the DataStore it is given.
"""
