"""
Start a local dev server for the invoicing actions backend.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting invoicing actions backend")
    print("=" * 60)
    print()
    print("API Endpoints:")
    print("   - Health Check:    GET  http://localhost:8000/health")
    print("   - Sign in:         POST http://localhost:8000/auth/login")
    print("   - Create invoice:  POST http://localhost:8000/dashboard/invoices/create")
    print("   - API Docs:             http://localhost:8000/docs")
    print()
    print("Test with curl:")
    print('   curl -X POST "http://localhost:8000/dashboard/invoices/create" \\')
    print('     -H "Authorization: Bearer <token>" \\')
    print('     -d "customerId=<uuid>&amount=49.99&status=pending"')
    print()
    print("=" * 60)

    uvicorn.run(
        "invoicing.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
