"""
Tools package for SanMar MCP server

This package contains all the tool modules organized by functionality:
- product_tools: SanMar product info, PromoStandards product data and media content
- inventory_tools: SanMar and PromoStandards inventory levels
- pricing_tools: SanMar pricing, PromoStandards pricing/configuration and FOB points
- invoice_tools: SanMar invoices and PromoStandards invoices
- order_tools: Packing slips, shipment notifications and order status
- purchase_order_tools: SanMar standard and PromoStandards purchase orders
- shared: SOAP client cache, credentials and the operation registry

Request pipeline (one pass per tool call):
- registry: OperationDescriptor for every tool (endpoint, schema, envelope, extractors)
- validation: argument checks, including fields required only for some queryType values
- envelopes: SOAP request envelopes in the SanMar and PromoStandards conventions
- outcomes: domain error / fault detection and the Outcome variants
- gateway: call_tool() drives the pipeline, dispatch() is used by every tool
"""
