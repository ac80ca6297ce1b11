"""Identifier resolvers: area index, city, warehouse and counterparty."""
