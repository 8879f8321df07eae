"""
Extraction Prompt.

The fixed task description sent with every document. It defines the JSON
shape the ledger ingests and the rules the model must follow for
multi-product invoices, tax, discounts and undeterminable fields.
"""

EXTRACTION_PROMPT = """
You extract invoice, product and customer data from business documents
(PDF invoices, photographed or scanned invoices, and spreadsheet exports
flattened to text).

Return a single JSON object with exactly these three arrays:

{
  "invoices": [
    {
      "serialNumber": "string, the invoice number",
      "customerName": "string",
      "productName": "string",
      "quantity": integer,
      "tax": number, tax amount in INR,
      "totalAmount": number, amount including tax in INR,
      "date": "string, YYYY-MM-DD",
      "missingFields": ["names of fields that could not be determined"]
    }
  ],
  "products": [
    {
      "name": "string",
      "quantity": integer,
      "unitPrice": number in INR,
      "tax": number in INR,
      "priceWithTax": number in INR,
      "discount": number in INR, only when a discount is stated,
      "missingFields": ["names of fields that could not be determined"]
    }
  ],
  "customers": [
    {
      "name": "string",
      "phoneNumber": "string",
      "totalPurchaseAmount": number in INR,
      "email": "string, only when stated",
      "address": "string, only when stated",
      "missingFields": ["names of fields that could not be determined"]
    }
  ]
}

Rules:
1. Line items: when one serial number lists several products, emit one
   invoice entry per product. Every entry repeats the same serialNumber.
   Example: serial RAY/23-24/286 listing a phone, a phone cover and
   headphones becomes three invoice entries with serialNumber
   "RAY/23-24/286".
2. Tax: when both the amount before tax and the final amount are shown,
   tax = final amount - amount before tax. Do not recompute tax from a
   percentage in that case.
3. Discounts: apply the discount to the base price first. unitPrice is the
   discounted price, and tax is computed on the discounted price.
   Example: base price 1000 with a 10% discount gives unitPrice 900. If
   the final amount with tax is 1062 then tax = 1062 - 900 = 162.
4. Missing data: never invent a default. Leave the field out and list its
   name in that entry's "missingFields".
5. Customers: totalPurchaseAmount is the sum over that customer's invoices
   in this document.
6. Extract every invoice, product and customer in the document.
7. All amounts are in INR.
8. Reply with the JSON object only, without commentary.
"""

TEXT_DOCUMENT_HEADER = "\n\nDocument Content:\n"
