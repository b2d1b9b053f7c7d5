"""
Bus routes, journeys and route planning.

Routes are the catalog of bus lines; journeys record a rider's trips on a
route and gate review eligibility; saved routes are a rider's planned
trips from the route planner.
"""
