# ==============================================================================
# DATOS POR DEFECTO - Conjunto inicial de la tienda
# ==============================================================================
# Se usan cuando un archivo de datos no existe o está corrupto, y al
# reiniciar la aplicación (reset_all). Nunca se modifican en sitio:
# los repositorios trabajan siempre sobre copias (ver default_collection()).
# ==============================================================================

import copy
from typing import Any, Dict, List


DEFAULT_PRODUCTS: List[Dict[str, Any]] = [
    {
        'id': 'prod-1',
        'name': 'Cámara Instantánea Mini 12',
        'barcode': '100000000001',
        'cost': 55.0,
        'price': 79.0,
        'minimumPrice': 70.0,
        'stock': 8,
        'lowStockThreshold': 3,
        'category': 'Cameras',
        'supplier': 'FotoMundo',
        'image': 'https://placehold.co/300x300.png',
        'purchaseDate': '2024-05-02',
    },
    {
        'id': 'prod-2',
        'name': 'Laptop Ultraligera 14"',
        'barcode': '100000000002',
        'cost': 520.0,
        'price': 689.0,
        'minimumPrice': 640.0,
        'stock': 4,
        'lowStockThreshold': 2,
        'category': 'Laptops',
        'supplier': 'TecnoImport',
        'image': 'https://placehold.co/300x300.png',
        'purchaseDate': '2024-05-10',
    },
    {
        'id': 'prod-3',
        'name': 'Teléfono Inteligente A15',
        'barcode': '100000000003',
        'cost': 140.0,
        'price': 189.0,
        'minimumPrice': 175.0,
        'stock': 12,
        'lowStockThreshold': 4,
        'category': 'Phones',
        'supplier': 'TecnoImport',
        'image': 'https://placehold.co/300x300.png',
        'purchaseDate': '2024-06-01',
    },
    {
        'id': 'prod-4',
        'name': 'Cargador USB-C 20W',
        'barcode': '100000000004',
        'cost': 4.5,
        'price': 9.0,
        'minimumPrice': 7.0,
        'stock': 2,
        'lowStockThreshold': 10,
        'category': 'Accessories',
        'supplier': 'Accesorios del Centro',
        'image': 'https://placehold.co/300x300.png',
        'purchaseDate': '2024-06-03',
    },
    {
        'id': 'prod-5',
        'name': 'Audífonos Inalámbricos',
        'barcode': '100000000005',
        'cost': 18.0,
        'price': 35.0,
        'minimumPrice': 29.0,
        'stock': 15,
        'lowStockThreshold': 5,
        'category': 'Audio',
        'supplier': 'SonidoPro',
        'image': 'https://placehold.co/300x300.png',
        'purchaseDate': '2024-06-12',
    },
    {
        'id': 'prod-6',
        'name': 'Pantalla de Repuesto A15',
        'barcode': '100000000006',
        'cost': 22.0,
        'price': 45.0,
        'minimumPrice': 38.0,
        'stock': 0,
        'lowStockThreshold': 2,
        'category': 'Repair Parts',
        'supplier': 'Repuestos Express',
        'image': 'https://placehold.co/300x300.png',
        'purchaseDate': '2024-06-20',
    },
]

DEFAULT_SALES: List[Dict[str, Any]] = [
    {
        'id': 'SALE-1',
        'customerName': 'Cliente de mostrador',
        'items': [
            {
                'id': 'prod-5',
                'name': 'Audífonos Inalámbricos',
                'barcode': '100000000005',
                'cost': 18.0,
                'price': 35.0,
                'minimumPrice': 29.0,
                'stock': 16,
                'lowStockThreshold': 5,
                'category': 'Audio',
                'supplier': 'SonidoPro',
                'image': 'https://placehold.co/300x300.png',
                'purchaseDate': '2024-06-12',
                'quantity': 1,
            },
        ],
        'subtotal': 35.0,
        'tax': 0.0,
        'total': 35.0,
        'date': '2024-06-15T10:24:00+00:00',
        'paymentMethod': 'cash',
    },
]

DEFAULT_RECEIVABLES: List[Dict[str, Any]] = [
    {
        'id': 'R-1',
        'customerName': 'Ana Torres',
        'totalAmount': 189.0,
        'amountPaid': 50.0,
        'issueDate': '2024-06-10T09:00:00+00:00',
        'dueDate': '2024-07-10T00:00:00+00:00',
        'status': 'Partially Paid',
    },
]

DEFAULT_MAINTENANCE_JOBS: List[Dict[str, Any]] = [
    {
        'id': 'M-1',
        'customerName': 'Luis Paredes',
        'productName': 'Teléfono Inteligente A15',
        'issueDescription': 'Pantalla rota',
        'status': 'In Progress',
        'dateReceived': '2024-06-18',
        'cost': 0.0,
        'notes': 'Cliente pide presupuesto antes de reparar',
    },
]


def default_collection(dataset: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Retorna una copia profunda del conjunto por defecto."""
    return copy.deepcopy(dataset)
