# Copyright (c) 2009-2010 Six Apart Ltd.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice,
#   this list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of Six Apart Ltd. nor the names of its contributors may
#   be used to endorse or promote products derived from this software without
#   specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

import unittest

import mock
import simplejson as json

from paceobjects.exceptions import InvalidFormat, MissingKey, NotFound
from paceobjects.keycollection import KeyCollection
from paceobjects.model import (BelongsTo, HasMany, Model, RelationshipResolver,
    is_compound_key, join_keys, split_key)
from paceobjects.service import RemoteObjectService
from paceobjects.xpath import Builder


class ModelTestCase(unittest.TestCase):

    def setUp(self):
        self.service = mock.Mock(spec=RemoteObjectService)

    def model(self, type, attributes=None, exists=False):
        model = Model(self.service, type, attributes)
        model.exists = exists
        return model


class TestKeys(ModelTestCase):

    def test_join_and_split(self):
        self.assertEqual(join_keys(['12345', '01']), '12345:01')
        self.assertEqual(join_keys(['12345', None, 2]), '12345::2')
        self.assertEqual(split_key('12345:01'), ['12345', '01'])
        self.assertEqual(split_key(99), ['99'])
        self.assertTrue(is_compound_key('job:jobPart'))
        self.assertFalse(is_compound_key('job'))
        self.assertFalse(is_compound_key(12345))

    def test_key_order(self):
        bar = self.model('Bar', {'primaryKey': 9, 'id': 99, 'bar': '99999', 'foo': 'f'})
        self.assertEqual(bar.key(), 9)
        bar.unset_attribute('primaryKey')
        self.assertEqual(bar.key(), 99)
        bar.unset_attribute('id')
        self.assertEqual(bar.key(), '99999')
        self.assertEqual(bar.key('foo'), 'f')

    def test_registered_key_field(self):
        attachment = self.model('FileAttachment', {'id': 1, 'attachment': 77})
        self.assertEqual(attachment.key(), 77)

    def test_missing_key(self):
        for value in (None, 0, ''):
            bar = self.model('Bar', {'id': value})
            self.assertRaises(MissingKey, bar.key)
        self.assertRaises(MissingKey, self.model('Bar').key)

    def test_split_own_key(self):
        part = self.model('JobPart', {'primaryKey': '12345:01'})
        self.assertEqual(part.split_key(), ['12345', '01'])
        self.assertEqual(part.split_key('1:2:3'), ['1', '2', '3'])
        self.assertEqual(part.join_keys(['1', '2']), '1:2')


class TestAttributes(ModelTestCase):

    def test_type_must_be_capitalized(self):
        self.assertRaises(InvalidFormat, Model, self.service, 'salesPerson')
        self.assertRaises(InvalidFormat, Model, self.service, 'Sales Person')
        self.assertEqual(Model(self.service, 'SalesPerson').type, 'SalesPerson')

    def test_attribute_access(self):
        job = self.model('Job', {'job': '12345'})
        self.assertEqual(job.job, '12345')
        self.assertEqual(job['job'], '12345')
        self.assertTrue(job.nothing is None)
        self.assertTrue(job['nothing'] is None)
        self.assertTrue('job' in job)
        self.assertFalse('nothing' in job)

        job.description = 'Brochures'
        self.assertEqual(job.attributes, {'job': '12345', 'description': 'Brochures'})
        del job.description
        self.assertFalse(job.has_attribute('description'))
        self.assertEqual(list(job), ['job'])

    def test_method_names_need_subscripts(self):
        job = self.model('Job')

        def set_key():
            job.key = 'x'

        self.assertRaises(AttributeError, set_key)
        job['key'] = 'x'
        self.assertEqual(job.get_attribute('key'), 'x')
        self.assertTrue(callable(job.key))

    def test_exists_is_not_an_attribute(self):
        job = self.model('Job', {'job': '1'}, exists=True)
        self.assertTrue(job.exists)
        self.assertFalse(job.has_attribute('exists'))
        self.assertFalse(job.is_dirty())

    def test_model_values_store_keys(self):
        job = self.model('Job', {'job': '12345'})
        part = self.model('JobPart')
        part.job = job
        self.assertEqual(part.job, '12345')

    def test_equality(self):
        one = self.model('Job', {'job': '1'})
        self.assertEqual(one, self.model('Job', {'job': '1'}))
        self.assertNotEqual(one, self.model('Job', {'job': '2'}))
        self.assertNotEqual(one, self.model('Customer', {'job': '1'}))
        self.assertNotEqual(one, {'job': '1'})

    def test_str(self):
        job = self.model('Job', {'job': '1', 'amount': 2})
        self.assertEqual(json.loads(str(job)), {'job': '1', 'amount': 2})

    def test_dirty(self):
        job = self.model('Job', {'job': '1', 'description': 'a'})
        self.assertFalse(job.is_dirty())
        self.assertEqual(job.get_dirty(), {})

        job.description = 'b'
        job.quantity = 5
        self.assertTrue(job.is_dirty())
        self.assertEqual(job.get_dirty(), {'description': 'b', 'quantity': 5})
        self.assertEqual(job.original, {'job': '1', 'description': 'a'})

        job.restore()
        self.assertFalse(job.is_dirty())
        self.assertEqual(job.description, 'a')


class TestPersistence(ModelTestCase):

    def test_read(self):
        self.service.read.return_value = {'job': '12345', 'description': 'Brochures'}
        job = self.model('Job').read('12345')

        self.service.read.assert_called_once_with('Job', '12345')
        self.assertTrue(job.exists)
        self.assertFalse(job.is_dirty())
        self.assertEqual(job.description, 'Brochures')

    def test_read_missing(self):
        self.service.read.return_value = None
        self.assertTrue(self.model('Job').read('404') is None)

    def test_read_empty_keys(self):
        job = self.model('Job')
        for key in (None, '', 0):
            self.assertTrue(job.read(key) is None)
        self.assertFalse(self.service.read.called)

    def test_read_or_fail(self):
        self.service.read.return_value = None
        try:
            self.model('Job').read_or_fail('404')
        except NotFound as exc:
            self.assertEqual(exc.type, 'Job')
            self.assertEqual(exc.key, '404')
            self.assertEqual(str(exc), 'Job [404] does not exist.')
        else:
            self.fail('NotFound not raised')

    def test_save_creates_then_updates(self):
        self.service.create.return_value = {'job': '1', 'description': 'a', 'jobType': 3}
        job = self.model('Job', {'description': 'a'})
        self.assertTrue(job.save())

        self.service.create.assert_called_once_with('Job', {'description': 'a'})
        self.assertTrue(job.exists)
        self.assertEqual(job.jobType, 3)
        self.assertFalse(job.is_dirty())

        self.service.update.return_value = {'job': '1', 'description': 'b', 'jobType': 3}
        job.description = 'b'
        self.assertTrue(job.save())
        self.service.update.assert_called_once_with('Job',
            {'job': '1', 'description': 'b', 'jobType': 3})
        self.assertEqual(self.service.create.call_count, 1)
        self.assertFalse(job.is_dirty())

    def test_create(self):
        self.service.create.return_value = {'customer': 'C1', 'custName': 'Acme'}
        customer = self.model('Customer').create({'custName': 'Acme'})
        self.assertTrue(customer.exists)
        self.assertEqual(customer.key(), 'C1')

    def test_delete(self):
        job = self.model('Job', {'job': '1'})
        self.assertTrue(job.delete() is None)
        self.assertFalse(self.service.delete.called)

        job.exists = True
        self.assertTrue(job.delete())
        self.service.delete.assert_called_once_with('Job', '1')
        self.assertFalse(job.exists)

    def test_duplicate(self):
        self.service.clone.return_value = {'job': '2', 'description': 'b'}
        job = self.model('Job', {'job': '1', 'description': 'a'}, exists=True)
        job.description = 'b'

        clone = job.duplicate('2')

        self.service.clone.assert_called_once_with('Job',
            {'job': '1', 'description': 'a'}, {'description': 'b'}, '2')
        self.assertTrue(clone.exists)
        self.assertEqual(clone.key(), '2')
        self.assertEqual(job.description, 'a')
        self.assertFalse(job.is_dirty())

    def test_duplicate_unsaved(self):
        self.assertTrue(self.model('Job', {'job': '1'}).duplicate() is None)
        self.assertFalse(self.service.clone.called)

    def test_fresh(self):
        self.service.read.return_value = {'job': '1', 'description': 'new'}
        job = self.model('Job', {'job': '1', 'description': 'old'}, exists=True)
        fresh = job.fresh()
        self.assertEqual(fresh.description, 'new')
        self.assertEqual(job.description, 'old')
        self.assertTrue(self.model('Job', {'job': '1'}).fresh() is None)

    def test_find(self):
        self.service.find.return_value = ['1', '2']
        keys = self.model('Job').find('@adminStatus = "O"')
        self.service.find.assert_called_once_with('Job', '@adminStatus = "O"',
            None, None, None, [])
        self.assertIsInstance(keys, KeyCollection)
        self.assertEqual(keys.keys(), ['1', '2'])

    def test_find_fields(self):
        fields = [{'name': 'description', 'xpath': '@description'}]
        self.service.find.return_value = [
            {'primaryKey': '1', 'fields': [{'name': 'description', 'value': 'a'}]},
        ]
        keys = self.model('Job').find('@job = "1"', fields=fields)
        self.service.find.assert_called_once_with('Job', '@job = "1"',
            None, 0, 1000, fields)
        self.assertEqual(keys.first().description, 'a')
        self.assertFalse(self.service.read.called)

    def test_find_nothing(self):
        self.service.find.return_value = None
        self.assertTrue(self.model('Job').find('@job = "x"').is_empty())


class TestBuilderMethods(ModelTestCase):

    def test_builder_methods(self):
        for name in Model.builder_methods:
            self.assertTrue(hasattr(Builder, name), name)
            self.assertEqual(getattr(Model, name).__name__, name)

    def test_builder_method_factory_is_not_kept(self):
        self.assertFalse(hasattr(Model, 'make_builder_method'))
        self.assertTrue(self.model('Job').make_builder_method is None)

    def test_filter_starts_a_query(self):
        job = self.model('Job')
        query = job.filter('@adminStatus', 'O')
        self.assertIsInstance(query, Builder)
        self.assertTrue(query.model is job)
        self.assertEqual(query.to_xpath(), '@adminStatus = "O"')
        self.assertEqual(job.filter('@job', '1').to_xpath(), '@job = "1"')

    def test_first(self):
        self.service.find.return_value = ['7']
        self.service.read.return_value = {'job': '7'}
        job = self.model('Job').sort('@job', True).first()
        self.assertEqual(job.job, '7')
        self.service.find.assert_called_once_with('Job', '',
            {'XPathDataSort': [{'xpath': '@job', 'descending': True}]}, 0, None, [])

    def test_first_or_new(self):
        self.service.find.return_value = []
        job = self.model('Job').filter('@job', 'x').first_or_new()
        self.assertFalse(job.exists)
        self.assertEqual(job.type, 'Job')


class TestRelationships(ModelTestCase):

    def test_resolver(self):
        resolver = RelationshipResolver('Job')
        self.assertEqual(resolver.resolve('csr', ['csr', 'job']), BelongsTo('CSR', 'csr'))
        self.assertEqual(resolver.resolve('jobParts', ['csr']), HasMany('JobPart', 'job'))
        self.assertEqual(resolver.resolve('jobStatuses', []), HasMany('JobStatus', 'job'))

    def test_belongs_to(self):
        self.service.read.return_value = {'customer': 'C1'}
        job = self.model('Job', {'job': '1', 'customer': 'C1'})
        customer = job.belongs_to('Customer', 'customer')
        self.service.read.assert_called_once_with('Customer', 'C1')
        self.assertEqual(customer.type, 'Customer')

    def test_belongs_to_without_key(self):
        job = self.model('Job', {'job': '1'})
        self.assertTrue(job.belongs_to('Customer', 'customer') is None)
        self.assertFalse(self.service.read.called)

    def test_belongs_to_compound(self):
        self.service.read.return_value = {'primaryKey': '12345:01'}
        material = self.model('JobMaterial', {'job': '12345', 'jobPart': '01'})
        material.belongs_to('JobPart', 'job:jobPart')
        self.service.read.assert_called_once_with('JobPart', '12345:01')

    def test_has_many(self):
        job = self.model('Job', {'job': '12345'})
        parts = job.has_many('JobPart', 'job')
        self.assertIsInstance(parts, Builder)
        self.assertEqual(parts.model.type, 'JobPart')
        self.assertEqual(parts.to_xpath(), '@job = "12345"')

    def test_has_many_compound(self):
        part = self.model('JobPart', {'primaryKey': '12345:01'})
        materials = part.has_many('JobMaterial', 'job:jobPart')
        self.assertEqual(materials.to_xpath(), '@job = "12345" and @jobPart = "01"')

    def test_has_many_without_key(self):
        self.assertRaises(MissingKey, self.model('Job').has_many, 'JobPart', 'job')

    def test_has_many_find(self):
        self.service.find.return_value = [10, 11]
        job = self.model('Job', {'job': '12345'})
        parts = job.has_many('JobPart', 'job').get()
        self.service.find.assert_called_once_with('JobPart', '@job = "12345"',
            None, 0, None, [])
        self.assertEqual(len(parts), 2)

    def test_morph_many(self):
        job = self.model('Job', {'job': '12345'})
        attachments = job.morph_many('FileAttachment')
        self.assertEqual(attachments.model.type, 'FileAttachment')
        self.assertEqual(attachments.to_xpath(),
            '@baseObject = "Job" and @baseObjectKey = "12345"')

    def test_related_belongs_to_is_read_once(self):
        self.service.read.return_value = {'csr': 'ABC', 'name': 'Pat'}
        job = self.model('Job', {'job': '1', 'csr': 'ABC'})
        self.assertFalse(job.relation_loaded('csr'))

        csr = job.related('csr')
        self.assertEqual(csr.type, 'CSR')
        self.assertEqual(csr.name, 'Pat')
        self.assertTrue(job.relation_loaded('csr'))
        self.assertTrue(job.related('csr') is csr)
        self.service.read.assert_called_once_with('CSR', 'ABC')

    def test_related_has_many(self):
        job = self.model('Job', {'job': '12345'})
        parts = job.related('jobParts')
        self.assertIsInstance(parts, Builder)
        self.assertEqual(parts.model.type, 'JobPart')
        self.assertEqual(parts.to_xpath(), '@job = "12345"')
        self.assertFalse(job.relation_loaded('jobParts'))
        self.assertFalse(self.service.find.called)


class TestScenarios(ModelTestCase):

    def test_compound_key_round_trip(self):
        for parts in (['12345', '01'], ['a', ''], ['', 'b']):
            self.assertEqual(split_key(join_keys(parts)), parts)

    def test_save_clears_dirty(self):
        customer = self.model('Customer', {'customer': 'C1', 'name': 'John Smith'},
            exists=True)
        customer.name = 'Jane Smith'
        self.assertTrue(customer.is_dirty())
        self.assertEqual(customer.get_dirty(), {'name': 'Jane Smith'})

        self.service.update.side_effect = lambda type, attributes: attributes
        customer.save()
        self.assertFalse(customer.is_dirty())
        self.assertEqual(customer.name, 'Jane Smith')

    def test_related_model_as_attribute(self):
        csr = self.model('CSR', {'id': 3, 'name': 'Pat'})
        job = self.model('Job', {'job': '1'})
        job.csr = csr
        self.assertEqual(job.csr, 3)
        self.assertEqual(job.get_dirty(), {'csr': 3})
