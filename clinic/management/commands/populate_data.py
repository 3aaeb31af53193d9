"""
Management command to populate the database with sample clinic data.
"""
from django.core.management import call_command
from django.core.management.base import BaseCommand
from django.utils import timezone
from datetime import timedelta
from decimal import Decimal
import random
from clinic.models import Category, Client, ClinicLog, InventoryItem, Issuer, Patient, Reimbursement, Supplier, User
from clinic.services.clinic_logs import clinic_logs
from clinic.services.inventory import medicines, supplies
from clinic.services.reimbursements import reimbursements


MEDICINE_CATEGORIES = ['Analgesic', 'Antihistamine', 'Antacid', 'Antibiotic']
SUPPLY_CATEGORIES = ['Wound Care', 'Consumables', 'Diagnostics']
SUPPLIERS = ['MedSource Trading', 'Unilab Distribution', 'HealthPlus Supply']

MEDICINES = [
    ('Paracetamol 500mg', 'Analgesic', 'tablet', 200, 50, '2.50'),
    ('Ibuprofen 200mg', 'Analgesic', 'tablet', 120, 30, '4.00'),
    ('Cetirizine 10mg', 'Antihistamine', 'tablet', 80, 20, '6.75'),
    ('Aluminum Hydroxide', 'Antacid', 'tablet', 60, 20, '5.00'),
    ('Amoxicillin 500mg', 'Antibiotic', 'capsule', 15, 20, '9.50'),
]
SUPPLIES = [
    ('Gauze Pad', 'Wound Care', 'piece', 300, 50, '3.00'),
    ('Adhesive Bandage', 'Wound Care', 'piece', 500, 100, '1.25'),
    ('Cotton Balls', 'Consumables', 'pack', 40, 10, '35.00'),
    ('Thermometer Cover', 'Diagnostics', 'piece', 0, 25, '0.80'),
]

LAST_NAMES = ['Santos', 'Reyes', 'Cruz', 'Bautista', "O'Neil", 'Garcia', 'Mendoza', 'Dela Cruz']
FIRST_NAMES = ['Ana', 'Mark', 'Liza', 'Paolo', 'Grace', 'Miguel', 'Joy', 'Carlo']
CLIENTS = ['Acme BPO', 'Northwind Logistics', 'Globex Services']
COMPLAINTS = ['Headache', 'Fever and chills', 'Stomach ache', 'Minor cut on finger', 'Allergic rhinitis']


class Command(BaseCommand):
    help = 'Populate database with sample clinic data'

    def add_arguments(self, parser):
        parser.add_argument('--logs', type=int, default=25)
        parser.add_argument('--reimbursements', type=int, default=10)
        parser.add_argument('--seed', type=int, default=None)

    def handle(self, *args, **options):
        if options['seed'] is not None:
            random.seed(options['seed'])
        self.stdout.write('Creating sample data...')

        call_command('ensure_demo_users', stdout=self.stdout)
        nurse = User.objects.get(username='nurse@clinic.local')
        staff = User.objects.get(username='staff@clinic.local')

        self.create_categories()
        self.create_suppliers()
        self.create_inventory(nurse)
        self.create_directory(nurse)
        self.create_clinic_logs(nurse, options['logs'])
        self.create_reimbursements(staff, options['reimbursements'])

        self.stdout.write(self.style.SUCCESS('Sample data created.'))

    def create_categories(self):
        for name in MEDICINE_CATEGORIES:
            Category.objects.get_or_create(item_type=Category.TYPE_MEDICINE, name=name)
        for name in SUPPLY_CATEGORIES:
            Category.objects.get_or_create(item_type=Category.TYPE_SUPPLY, name=name)
        self.stdout.write(f'  categories: {Category.objects.count()}')

    def create_suppliers(self):
        for name in SUPPLIERS:
            Supplier.objects.get_or_create(name=name)
        self.stdout.write(f'  suppliers: {Supplier.objects.count()}')

    def create_inventory(self, user):
        for repo, rows, category_type in (
            (medicines, MEDICINES, Category.TYPE_MEDICINE),
            (supplies, SUPPLIES, Category.TYPE_SUPPLY),
        ):
            for name, category, unit, stock, reorder, price in rows:
                if InventoryItem.objects.filter(item_type=repo.item_type, name=name).exists():
                    continue
                repo.save({
                    'name': name,
                    'category': Category.objects.get(item_type=category_type, name=category),
                    'supplier': Supplier.objects.get(name=random.choice(SUPPLIERS)),
                    'unit': unit,
                    'stock': stock,
                    'reorder_level': reorder,
                    'price': Decimal(price),
                }, user)
        self.stdout.write(f'  inventory items: {InventoryItem.objects.count()}')

    def create_directory(self, nurse):
        for name in CLIENTS:
            Client.objects.get_or_create(name=name)
        for name in (nurse.display_name, 'Clinic Physician'):
            Issuer.objects.get_or_create(name=name)
        # patients for the first employee numbers used by the sample logs
        for i in range(5):
            Patient.objects.get_or_create(
                email=f'patient{i}@example.com',
                defaults={
                    'employee_id': f'EMP-{1000 + i}',
                    'first_name': random.choice(FIRST_NAMES),
                    'last_name': random.choice(LAST_NAMES),
                    'company': random.choice(CLIENTS),
                },
            )
        self.stdout.write(f'  clients: {Client.objects.count()}, issuers: {Issuer.objects.count()}, '
                          f'patients: {Patient.objects.count()}')

    def create_clinic_logs(self, nurse, count):
        today = timezone.localdate()
        for i in range(count):
            # only items with enough stock left for another visit
            medicine_names = self.in_stock(InventoryItem.TYPE_MEDICINE)
            supply_names = self.in_stock(InventoryItem.TYPE_SUPPLY)
            data = {
                'date': today - timedelta(days=random.randint(0, 60)),
                'lastName': random.choice(LAST_NAMES),
                'firstName': random.choice(FIRST_NAMES),
                'sex': random.choice(['Male', 'Female']),
                'employeeNumber': f'EMP-{1000 + i}',
                'client': random.choice(CLIENTS),
                'chiefComplaint': random.choice(COMPLAINTS),
                'issuedBy': nurse.display_name,
                'medicines': [],
                'supplies': [],
            }
            if medicine_names:
                data['medicines'].append({'name': random.choice(medicine_names), 'quantity': random.randint(1, 2)})
            if supply_names and (random.random() < 0.5 or not data['medicines']):
                data['supplies'].append({'name': random.choice(supply_names), 'quantity': 1})
            if not data['medicines'] and not data['supplies']:
                break
            clinic_logs.save(data, nurse)
        self.stdout.write(f'  clinic logs: {ClinicLog.objects.count()}')

    def in_stock(self, item_type):
        return list(InventoryItem.objects.filter(item_type=item_type, stock__gt=2).values_list('name', flat=True))

    def create_reimbursements(self, staff, count):
        today = timezone.localdate()
        for i in range(count):
            receipt = today - timedelta(days=random.randint(1, 30))
            reimbursements.save({
                'date': today,
                'employeeId': f'EMP-{2000 + i}',
                'fullNameEmployee': f'{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}',
                'fullNameDependent': '',
                'workLocation': random.choice(['Office', 'WFH']),
                'receiptDate': receipt,
                'amountRequested': Decimal(random.randint(150, 5000)),
                'email': f'employee{i}@example.com',
            }, staff)
        self.stdout.write(f'  reimbursements: {Reimbursement.objects.count()}')
