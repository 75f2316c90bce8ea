"""Create lookup, participant, workshop, admin and RSVP tables

Revision ID: h001_create_core_tables
Revises:
Create Date: 2025-09-01

Initial schema. Lookup tables feed the registration form; users keeps the
auth provider's id as its primary key; confirmed_count is a single row that
serializes RSVP admission.
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'h001_create_core_tables'
down_revision = None
branch_labels = None
depends_on = None

LOOKUP_TABLES = [
    ('gender', 'gender'),
    ('universities', 'uni'),
    ('majors', 'major'),
    ('interests', 'interest'),
    ('dietary_restrictions', 'restriction'),
    ('marketing_types', 'marketing'),
    ('experience_types', 'experience'),
]

PARTICIPANT_STATUSES = ('confirmed', 'pending', 'waitlisted', 'denied', 'declined')
YEARS_OF_STUDY = ('1st', '2nd', '3rd', '4th+', 'Recent Grad')
PARKING_STATES = ('Yes', 'No', 'Not sure')


def upgrade() -> None:
    for table, label in LOOKUP_TABLES:
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column(label, sa.String(255), nullable=False),
        )

    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('f_name', sa.String(255)),
        sa.Column('l_name', sa.String(255)),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('gender', sa.Integer(), sa.ForeignKey('gender.id')),
        sa.Column('university', sa.Integer(), sa.ForeignKey('universities.id')),
        sa.Column('major', sa.Integer(), sa.ForeignKey('majors.id')),
        sa.Column('experience', sa.Integer(), sa.ForeignKey('experience_types.id')),
        sa.Column('marketing', sa.Integer(), sa.ForeignKey('marketing_types.id')),
        sa.Column('prev_attendance', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('parking', sa.Enum(*PARKING_STATES, name='parking_state')),
        sa.Column('year_of_study', sa.Enum(*YEARS_OF_STUDY, name='year_of_study')),
        sa.Column('accommodations', sa.Text(), nullable=False, server_default=''),
        sa.Column('resume_url', sa.String(500)),
        sa.Column('resume_filename', sa.String(255)),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column(
            'status',
            sa.Enum(*PARTICIPANT_STATUSES, name='status'),
            nullable=False,
            server_default='waitlisted',
        ),
        sa.Column('checked_in', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('pending_email', sa.String(255)),
        sa.Column('email_change_requested_at', sa.DateTime(timezone=True)),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
    )
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_index('ix_users_status', 'users', ['status'])

    op.create_table(
        'user_interests',
        sa.Column('id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('interest', sa.Integer(), sa.ForeignKey('interests.id'), primary_key=True),
    )
    op.create_table(
        'user_diet_restrictions',
        sa.Column('id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('restriction', sa.Integer(), sa.ForeignKey('dietary_restrictions.id'), primary_key=True),
    )

    op.create_table(
        'workshops',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('event_name', sa.String(255), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('location', sa.String(255)),
        sa.Column('max_capacity', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
    )

    op.create_table(
        'workshop_registrations',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('workshop_id', sa.String(), sa.ForeignKey('workshops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('registered_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
        sa.Column('f_name', sa.String(255)),
        sa.Column('l_name', sa.String(255)),
        sa.Column('year_of_study', sa.String(50)),
        sa.Column('gender', sa.Integer()),
        sa.Column('major', sa.Integer()),
    )
    # One registration per user per workshop
    op.create_unique_constraint(
        'unique_user_workshop',
        'workshop_registrations',
        ['user_id', 'workshop_id'],
    )
    op.create_index('ix_workshop_registrations_user_id', 'workshop_registrations', ['user_id'])
    op.create_index('ix_workshop_registrations_workshop_id', 'workshop_registrations', ['workshop_id'])

    op.create_table(
        'admins',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('f_name', sa.String(255)),
        sa.Column('l_name', sa.String(255)),
        sa.Column(
            'role',
            sa.Enum('admin', 'super_admin', 'volunteer', name='admin_role'),
            nullable=False,
            server_default='volunteer',
        ),
        sa.Column(
            'status',
            sa.Enum('active', 'inactive', 'suspended', name='admin_status'),
            nullable=False,
            server_default='active',
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
    )

    op.create_table(
        'pre_reg',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('time', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
    )
    op.create_table(
        'confirmed_count',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('count', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()')),
    )
    op.execute("INSERT INTO confirmed_count (id, count) VALUES (1, 0)")


def downgrade() -> None:
    op.drop_table('confirmed_count')
    op.drop_table('pre_reg')
    op.drop_table('admins')
    op.drop_index('ix_workshop_registrations_workshop_id', table_name='workshop_registrations')
    op.drop_index('ix_workshop_registrations_user_id', table_name='workshop_registrations')
    op.drop_constraint('unique_user_workshop', 'workshop_registrations', type_='unique')
    op.drop_table('workshop_registrations')
    op.drop_table('workshops')
    op.drop_table('user_diet_restrictions')
    op.drop_table('user_interests')
    op.drop_index('ix_users_status', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    for table, _ in reversed(LOOKUP_TABLES):
        op.drop_table(table)

    for enum_name in ('admin_status', 'admin_role', 'status', 'year_of_study', 'parking_state'):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
