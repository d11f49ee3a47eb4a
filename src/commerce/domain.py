"""Commerce bounded context — cart, payment, orders and seller earnings.

Handles the buyer's pending cart, a simulated payment gateway, the order
ledger produced by successful checkouts, and the seller earnings balance
credited from those orders.
"""

from protean.domain import Domain

commerce = Domain(name="commerce")
