"""Raw API service, transport, response normalization and waybill assembly."""
