from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='DeliveryPartner',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('partner_id', models.CharField(blank=True, max_length=16, null=True, unique=True)),
                ('name', models.CharField(max_length=128)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('phone', models.CharField(db_index=True, max_length=10)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('gender', models.CharField(blank=True, default='', max_length=16)),
                ('alternate_mobile_number', models.CharField(blank=True, default='', max_length=16)),
                ('vehicle_type', models.CharField(choices=[('bike', 'Bike'), ('scooter', 'Scooter'), ('car', 'Car'), ('van', 'Van')], max_length=16)),
                ('vehicle_model', models.CharField(blank=True, default='', max_length=64)),
                ('vehicle_number', models.CharField(max_length=20, unique=True)),
                ('license_number', models.CharField(max_length=32, unique=True)),
                ('aadhar_number', models.CharField(blank=True, default='', max_length=16)),
                ('address', models.CharField(blank=True, default='', max_length=255)),
                ('city', models.CharField(blank=True, default='', max_length=64)),
                ('state', models.CharField(blank=True, default='', max_length=64)),
                ('pincode', models.CharField(blank=True, default='', max_length=12)),
                ('country', models.CharField(blank=True, default='India', max_length=64)),
                ('emergency_contact_name', models.CharField(blank=True, default='', max_length=128)),
                ('emergency_relationship', models.CharField(blank=True, default='', max_length=64)),
                ('emergency_contact_number', models.CharField(blank=True, default='', max_length=16)),
                ('profile_photo', models.CharField(blank=True, default='', max_length=255)),
                ('aadhar_document', models.CharField(blank=True, default='', max_length=255)),
                ('license_document', models.CharField(blank=True, default='', max_length=255)),
                ('vehicle_rc_document', models.CharField(blank=True, default='', max_length=255)),
                ('insurance_document', models.CharField(blank=True, default='', max_length=255)),
                ('pollution_cert_document', models.CharField(blank=True, default='', max_length=255)),
                ('id_proof_document', models.CharField(blank=True, default='', max_length=255)),
                ('application_status', models.CharField(choices=[('pending', 'Pending'), ('verified', 'Verified'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=16)),
                ('partner_status', models.CharField(blank=True, choices=[('active', 'Active'), ('inactive', 'Inactive'), ('suspended', 'Suspended')], db_index=True, max_length=16, null=True)),
                ('status_history', models.JSONField(blank=True, default=list)),
                ('password', models.CharField(blank=True, default='', max_length=128)),
                ('email_verification_token', models.CharField(blank=True, db_index=True, default='', max_length=64)),
                ('is_email_verified', models.BooleanField(default=False)),
                ('approved_at', models.DateTimeField(blank=True, null=True)),
                ('rejected_at', models.DateTimeField(blank=True, null=True)),
                ('rejection_reason', models.CharField(blank=True, default='', max_length=128)),
                ('suspension_reason', models.CharField(blank=True, default='', max_length=128)),
                ('suspension_note', models.TextField(blank=True, default='')),
                ('suspended_at', models.DateTimeField(blank=True, null=True)),
                ('rating', models.DecimalField(decimal_places=2, default=0, max_digits=3)),
                ('total_deliveries', models.PositiveIntegerField(default=0)),
                ('is_available', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ('-created_at',),
            },
        ),
        migrations.CreateModel(
            name='PartnerIdSequence',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('last_value', models.PositiveIntegerField(default=0)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
    ]
