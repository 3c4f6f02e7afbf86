"""
LED Quote Package

Quotation pricing for custom LED display configurations.
Turns a product, a display size, a controller and a buyer tier into a
tax-inclusive, line-itemized breakdown shared by every consumer.
"""

__version__ = "1.0.0"
