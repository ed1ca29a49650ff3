"""
Service layer.

``RentalService`` owns every business rule over rental records and is
the only component that mutates them.  ``rental_mapper`` translates
between transfer objects and domain records.
"""
